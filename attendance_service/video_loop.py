"""
Main video processing loops.

Two mutually exclusive modes:
- Attendance: frames -> detection -> recognition -> attendance log
- Enrollment: frames until capture -> detection -> new face record
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Tuple
import cv2
import numpy as np
from .session import AttendanceSession
from .events import send_event
from .face_store import FaceRecord
from .logging_config import get_logger
from .recognition.matching import Recognition, recognize
from .recognition.preprocessing import Region, crop_region, normalize_face, prepare_for_detection
from .utils.timing import format_duration

logger = get_logger(__name__)

KNOWN_COLOR = (0, 255, 0)
UNKNOWN_COLOR = (0, 0, 255)


class LoopState(Enum):
    RUNNING = 'running'
    STOPPED = 'stopped'


class EnrollmentState(Enum):
    WAITING_FOR_INPUT = 'waiting_for_input'
    CAPTURED = 'captured'
    CANCELLED = 'cancelled'


class RegionSource(Enum):
    REGION_DETECTED = 'region_detected'
    WHOLE_FRAME_FALLBACK = 'whole_frame_fallback'


@dataclass
class AttendanceSummary:
    """What one attendance run did."""

    frames_processed: int = 0
    marked: List[str] = field(default_factory=list)
    elapsed_seconds: float = 0.0
    started: bool = True


@dataclass
class EnrollmentResult:
    """Outcome of one enrollment run."""

    state: EnrollmentState
    region_source: Optional[RegionSource] = None
    record: Optional[FaceRecord] = None
    image_path: Optional[str] = None


def _read_frame(capture: Any) -> Optional[np.ndarray]:
    ret, frame = capture.read()
    if not ret or frame is None or frame.size == 0:
        return None
    return frame


def _publish(session: AttendanceSession, frame: np.ndarray) -> None:
    if session.preview is not None:
        session.preview.set_frame(frame)


def run_attendance(session: AttendanceSession, capture: Any, display: Any) -> AttendanceSummary:
    """
    Take attendance until the operator quits or the stream ends.

    Args:
        session: Session state
        capture: Object with read() -> (ok, frame)
        display: Object with show(frame) -> key or None

    Returns:
        AttendanceSummary of the run
    """
    config = session.config

    if len(session.store) == 0:
        logger.error('No registered faces found! Please register at least one face first.')
        return AttendanceSummary(started=False)

    logger.info('Starting attendance capture...')
    logger.info(f"Press '{config.quit_key}' to quit.")

    summary = AttendanceSummary()
    started_at = time.monotonic()
    state = LoopState.RUNNING

    while state is LoopState.RUNNING:
        frame = _read_frame(capture)
        if frame is None:
            logger.info('Camera stream ended')
            state = LoopState.STOPPED
            continue

        summary.frames_processed += 1
        results = process_frame(session, frame)

        draw_recognitions(frame, results)
        _publish(session, frame)

        key = display.show(frame)
        if key == config.quit_key:
            state = LoopState.STOPPED

    summary.marked = session.tracker.marked
    summary.elapsed_seconds = time.monotonic() - started_at

    logger.info(
        f'Attendance stopped after {format_duration(summary.elapsed_seconds)}: '
        f'{summary.frames_processed} frames, {len(summary.marked)} marked'
    )
    return summary


def process_frame(
    session: AttendanceSession,
    frame: np.ndarray
) -> List[Tuple[Region, Recognition]]:
    """
    Detect and recognize every face in one frame, marking first sightings.

    Args:
        session: Session state
        frame: Camera frame (BGR)

    Returns:
        List of (region, recognition) pairs
    """
    gray = prepare_for_detection(frame, equalize=True)
    regions = session.detector.detect(gray)

    results: List[Tuple[Region, Recognition]] = []

    for region in regions:
        recognition = recognize(crop_region(gray, region), session.store, session.config)
        results.append((region, recognition))

        if recognition.is_known:
            _mark_first_sighting(session, recognition.name)

    return results


def _mark_first_sighting(session: AttendanceSession, name: str) -> None:
    if session.tracker.already_marked(name):
        return

    logger.info(f'Detected: {name} (first time in this session)')
    record = session.attendance_log.append(name, session.clock())

    # Marked even when the append failed: a dropped event is not retried
    session.tracker.mark(name)

    if record is not None:
        send_event(record, session.config)


def draw_recognitions(frame: np.ndarray, results: List[Tuple[Region, Recognition]]) -> np.ndarray:
    """
    Draw face boxes and labels on a frame in place.

    Args:
        frame: Frame to draw on
        results: Output of process_frame

    Returns:
        The same frame
    """
    for (x, y, w, h), recognition in results:
        color = KNOWN_COLOR if recognition.is_known else UNKNOWN_COLOR
        label = recognition.name if recognition.is_known else 'Unknown'

        cv2.rectangle(frame, (x, y), (x + w, y + h), color, 2)
        cv2.putText(frame, label, (x, max(y - 10, 15)),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.9, color, 2)

    return frame


def run_enrollment(
    session: AttendanceSession,
    capture: Any,
    display: Any,
    name: str
) -> EnrollmentResult:
    """
    Register a new face from the camera.

    Args:
        session: Session state
        capture: Object with read() -> (ok, frame)
        display: Object with show(frame) -> key or None
        name: Identity name for the new face

    Returns:
        EnrollmentResult; the store is only changed when state is CAPTURED
    """
    config = session.config

    logger.info(f'Capturing new face for {name}...')
    logger.info(
        f"Look at the camera and press '{config.capture_key}' to capture, "
        f"'{config.quit_key}' to quit."
    )

    state = EnrollmentState.WAITING_FOR_INPUT
    captured: Optional[np.ndarray] = None

    while state is EnrollmentState.WAITING_FOR_INPUT:
        frame = _read_frame(capture)
        if frame is None:
            logger.warning('Camera stream ended before capture')
            state = EnrollmentState.CANCELLED
            continue

        _publish(session, frame)
        key = display.show(frame)

        if key == config.capture_key:
            captured = frame
            state = EnrollmentState.CAPTURED
        elif key == config.quit_key:
            state = EnrollmentState.CANCELLED

    if state is EnrollmentState.CANCELLED:
        logger.info('Cancelled capture.')
        return EnrollmentResult(state=state)

    return capture_face(session, captured, name)


def capture_face(session: AttendanceSession, frame: np.ndarray, name: str) -> EnrollmentResult:
    """
    Turn a captured frame into a new face record.

    Falls back to the whole frame when no face is detected.

    Args:
        session: Session state
        frame: Captured frame (BGR), saved as the backing image
        name: Identity name

    Returns:
        EnrollmentResult in state CAPTURED
    """
    gray = prepare_for_detection(frame, equalize=False)
    regions = session.detector.detect(gray)

    if regions:
        face = crop_region(gray, regions[0])
        source = RegionSource.REGION_DETECTED
    else:
        logger.warning('No face clearly detected, using whole frame as face.')
        face = gray
        source = RegionSource.WHOLE_FRAME_FALLBACK

    template = normalize_face(face, session.config.template_size)
    record = session.store.add(name, template, frame)

    return EnrollmentResult(
        state=EnrollmentState.CAPTURED,
        region_source=source,
        record=record,
        image_path=session.store.image_path(name),
    )
