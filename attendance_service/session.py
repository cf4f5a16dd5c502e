"""
Attendance session context.

Owns all state of one run so the loops receive it explicitly instead of
reaching for module globals.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Optional
from .config import Config
from .face_store import FaceStore, load_face_store
from .attendance_log import AttendanceLog
from .recognition.detector import FaceDetector
from .recognition.presence import SessionTracker
from .streaming import PreviewBuffer


@dataclass
class AttendanceSession:
    """
    State shared by the recognition and enrollment loops.

    Attributes:
        config: Service configuration
        detector: Object with detect(gray) -> list of (x, y, w, h)
        store: Registered faces
        attendance_log: CSV log
        tracker: Names already marked this session
        preview: Frame buffer for the preview server, if enabled
        clock: Returns the current local time
    """

    config: Config
    detector: Any
    store: FaceStore
    attendance_log: AttendanceLog
    tracker: SessionTracker = field(default_factory=SessionTracker)
    preview: Optional[PreviewBuffer] = None
    clock: Callable[[], datetime] = datetime.now


def build_session(config: Config, detector: Any = None) -> AttendanceSession:
    """
    Build a session from configuration.

    Args:
        config: Service configuration
        detector: Detector to use instead of loading the Haar cascade

    Returns:
        New session with the face store loaded

    Raises:
        RuntimeError: If the cascade cannot be loaded
    """
    if detector is None:
        detector = FaceDetector(config)

    return AttendanceSession(
        config=config,
        detector=detector,
        store=load_face_store(config),
        attendance_log=AttendanceLog(config.attendance_file),
        preview=PreviewBuffer() if config.preview_port > 0 else None,
    )
