"""
Configuration module for Attendance Service.

Loads configuration from environment variables with sensible defaults.
All settings are immutable after initialization.
"""

import os
from dataclasses import dataclass
from typing import Tuple

import cv2


CASCADE_FILENAME = 'haarcascade_frontalface_default.xml'


def default_cascade_path() -> str:
    """
    Locate the frontal face cascade bundled with opencv-python.

    Builds without the cv2.data module fall back to the bare file name,
    resolved against the working directory.

    Returns:
        Path to the cascade XML
    """
    data = getattr(cv2, 'data', None)
    haarcascades = getattr(data, 'haarcascades', None)
    if not haarcascades:
        return CASCADE_FILENAME
    return os.path.join(haarcascades, CASCADE_FILENAME)


@dataclass(frozen=True)
class Config:
    """
    Immutable configuration for Attendance Service.

    Storage:
        faces_dir: Folder holding one template image per person
        face_image_ext: Extension of template images (load pattern and enrollment output)
        attendance_file: Append-only CSV attendance log

    Camera Settings:
        camera_source: Camera source - can be:
            - Integer (0, 1, 2) for local webcam
            - RTSP/HTTP URL for a network stream
        camera_retries: Connection attempts before giving up

    Detection:
        cascade_path: Haar cascade XML used for face detection
        detect_scale_factor: detectMultiScale scale factor
        detect_min_neighbors: detectMultiScale minNeighbors
        detect_min_size: Smallest face (width, height) considered

    Recognition:
        template_size: Size (width, height) every face is normalized to
        histogram_bins: Number of intensity histogram buckets
        recognition_threshold: Correlation a match must exceed to be known

    Operator Controls:
        capture_key: Key that captures a frame during enrollment
        quit_key: Key that leaves the current loop
        key_wait_ms: Key poll timeout per frame
        show_window: Show the OpenCV window

    Integrations:
        preview_port: Port for the Flask preview server (0 = disabled)
        webhook_url: URL notified of each first sighting (empty = disabled)

    System:
        debug_mode: Enable debug logging
    """

    # Storage
    faces_dir: str
    face_image_ext: str
    attendance_file: str

    # Camera
    camera_source: str
    camera_retries: int

    # Detection
    cascade_path: str
    detect_scale_factor: float
    detect_min_neighbors: int
    detect_min_size: Tuple[int, int]

    # Recognition
    template_size: Tuple[int, int]
    histogram_bins: int
    recognition_threshold: float

    # Operator controls
    capture_key: str
    quit_key: str
    key_wait_ms: int
    show_window: bool

    # Integrations
    preview_port: int
    webhook_url: str

    # System
    debug_mode: bool

    @property
    def face_glob(self) -> str:
        """Filename pattern of template images inside faces_dir."""
        return f'*{self.face_image_ext}'


def load_config() -> Config:
    """
    Load configuration from environment variables.

    Returns:
        Config: Immutable configuration object
    """
    ext = os.getenv('FACE_IMAGE_EXT', '.jpg')
    if not ext.startswith('.'):
        ext = '.' + ext

    return Config(
        # Storage
        faces_dir=os.getenv('FACES_DIR', 'faces'),
        face_image_ext=ext,
        attendance_file=os.getenv('ATTENDANCE_FILE', 'attendance.csv'),

        # Camera
        camera_source=os.getenv('CAMERA_SOURCE', '0'),
        camera_retries=int(os.getenv('CAMERA_RETRIES', '1')),

        # Detection
        cascade_path=os.getenv('CASCADE_PATH') or default_cascade_path(),
        detect_scale_factor=float(os.getenv('DETECT_SCALE_FACTOR', '1.1')),
        detect_min_neighbors=int(os.getenv('DETECT_MIN_NEIGHBORS', '3')),
        detect_min_size=(30, 30),

        # Recognition
        template_size=(100, 100),
        histogram_bins=int(os.getenv('HISTOGRAM_BINS', '256')),
        recognition_threshold=float(os.getenv('RECOGNITION_THRESHOLD', '0.7')),

        # Operator controls
        capture_key=os.getenv('CAPTURE_KEY', 'c').lower(),
        quit_key=os.getenv('QUIT_KEY', 'q').lower(),
        key_wait_ms=int(os.getenv('KEY_WAIT_MS', '1')),
        show_window=os.getenv('SHOW_WINDOW', 'true').lower() == 'true',

        # Integrations
        preview_port=int(os.getenv('PREVIEW_PORT', '0')),
        webhook_url=os.getenv('ATTENDANCE_WEBHOOK_URL', ''),

        # System
        debug_mode=os.getenv('DEBUG', 'false').lower() == 'true',
    )
