"""
Event sending module.

Forwards first-sighting attendance records to an optional webhook.
"""

import requests
from .config import Config
from .attendance_log import AttendanceRecord
from .logging_config import get_logger

logger = get_logger(__name__)


def send_event(record: AttendanceRecord, config: Config) -> bool:
    """
    Send an attendance record to the configured webhook.

    Args:
        record: Record that was just written to the log
        config: Service configuration

    Returns:
        True if the event was delivered, False if disabled or failed
    """
    if not config.webhook_url:
        return False

    url = config.webhook_url

    try:
        logger.info(f'📤 Sending attendance event for {record.name}')

        response = requests.post(url, json=record.to_dict(), timeout=5)

        if response.ok:
            logger.debug('Event sent successfully')
            return True
        else:
            logger.error(f'❌ Failed to send event: {response.status_code} {response.text}')
            return False

    except requests.exceptions.Timeout:
        logger.error(f'❌ Timeout sending event to {url}')
        return False
    except requests.exceptions.ConnectionError:
        logger.error(f'❌ Connection error sending event to {url}')
        return False
    except requests.exceptions.RequestException as e:
        logger.error(f'❌ Error sending event: {e}')
        return False
