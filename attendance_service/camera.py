"""
Camera connection module.

Opens the configured video source:
- Local webcams (index 0, 1, 2)
- RTSP / HTTP streams
"""

import time
from typing import Union
import cv2
from .config import Config
from .logging_config import get_logger

logger = get_logger(__name__)


def parse_camera_source(camera_source: str) -> Union[int, str]:
    """
    Turn the configured source into what cv2.VideoCapture expects.

    Args:
        camera_source: Device index or stream URL

    Returns:
        Integer device index, or the URL unchanged
    """
    source = camera_source.strip()
    try:
        return int(source)
    except ValueError:
        return source


def connect_camera(config: Config) -> cv2.VideoCapture:
    """
    Open the camera, retrying with backoff when configured.

    Args:
        config: Service configuration

    Returns:
        Opened VideoCapture object

    Raises:
        RuntimeError: If the camera cannot be opened
    """
    source = parse_camera_source(config.camera_source)
    attempts = max(1, config.camera_retries)

    for attempt in range(attempts):
        if isinstance(source, int):
            logger.info(f'Opening camera index {source} (attempt {attempt + 1}/{attempts})...')
        else:
            logger.info(f'Opening camera stream {_sanitize_url(source)} (attempt {attempt + 1}/{attempts})...')

        video_capture = cv2.VideoCapture(source)

        if video_capture.isOpened():
            logger.info('✅ Camera opened')
            return video_capture

        video_capture.release()
        logger.warning('Failed to open camera')

        if attempt < attempts - 1:
            wait_time = 2 ** attempt
            logger.info(f'Retrying in {wait_time} seconds...')
            time.sleep(wait_time)

    raise RuntimeError('Error opening camera!')


def _sanitize_url(url: str) -> str:
    """
    Remove password from URL for logging.

    Args:
        url: URL with potential password

    Returns:
        Sanitized URL
    """
    if '://' not in url:
        return url

    protocol, rest = url.split('://', 1)
    if '@' not in rest:
        return url

    creds, host = rest.rsplit('@', 1)
    username = creds.split(':', 1)[0]
    return f'{protocol}://{username}@{host}'
