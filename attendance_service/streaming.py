"""
Video streaming module.

Holds the latest annotated frame for the preview server and turns it
into an MJPEG stream. The video loop writes, the Flask thread reads.
"""

import threading
import time
from typing import Generator, Optional
import numpy as np
import cv2


class PreviewBuffer:
    """Latest frame shared between the video loop and the preview server."""

    def __init__(self):
        self._frame: Optional[np.ndarray] = None
        self._lock = threading.Lock()

    def set_frame(self, frame: Optional[np.ndarray]) -> None:
        """
        Update current frame (thread-safe).

        Args:
            frame: New frame to set
        """
        with self._lock:
            self._frame = frame.copy() if frame is not None else None

    def get_frame_copy(self) -> Optional[np.ndarray]:
        """
        Get a copy of current frame (thread-safe).

        Returns:
            Copy of current frame or None
        """
        with self._lock:
            return self._frame.copy() if self._frame is not None else None

    def is_streaming(self) -> bool:
        with self._lock:
            return self._frame is not None


def encode_jpeg(frame: np.ndarray, quality: int = 85) -> Optional[bytes]:
    """Encode a frame as JPEG bytes, None on failure."""
    ret, buffer = cv2.imencode('.jpg', frame, [cv2.IMWRITE_JPEG_QUALITY, quality])
    if not ret:
        return None
    return buffer.tobytes()


def generate_mjpeg_frames(preview: PreviewBuffer) -> Generator[bytes, None, None]:
    """
    Generate MJPEG frames from the preview buffer.

    Yields:
        JPEG frame bytes with multipart headers
    """
    while True:
        frame = preview.get_frame_copy()

        if frame is None:
            time.sleep(0.1)
            continue

        jpeg = encode_jpeg(frame)

        if jpeg is None:
            time.sleep(0.033)
            continue

        yield (b'--frame\r\n'
               b'Content-Type: image/jpeg\r\n\r\n' + jpeg + b'\r\n')

        # ~30 FPS
        time.sleep(0.033)
