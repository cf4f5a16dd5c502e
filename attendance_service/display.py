"""
Operator display module.

Shows frames in an OpenCV window and polls the keyboard.
"""

from typing import Optional
import cv2
import numpy as np


class OpenCVDisplay:
    """Window plus key polling through cv2.imshow / cv2.waitKey."""

    def __init__(self, window_name: str, wait_ms: int = 1):
        self.window_name = window_name
        self.wait_ms = wait_ms

    def show(self, frame: np.ndarray) -> Optional[str]:
        """
        Show a frame and wait briefly for a key.

        Args:
            frame: Frame to show

        Returns:
            Pressed key as a lowercase character, or None
        """
        cv2.imshow(self.window_name, frame)
        return _decode_key(cv2.waitKey(self.wait_ms))

    def close(self) -> None:
        cv2.destroyWindow(self.window_name)


class HeadlessDisplay:
    """No window; never reports a key. Used when SHOW_WINDOW=false."""

    def show(self, frame: np.ndarray) -> Optional[str]:
        return None

    def close(self) -> None:
        pass


def _decode_key(code: int) -> Optional[str]:
    if code < 0:
        return None
    code &= 0xFF
    if code == 0xFF:
        return None
    return chr(code).lower()


def create_display(window_name: str, show_window: bool, wait_ms: int = 1):
    """Pick the display implementation for the configuration."""
    if show_window:
        return OpenCVDisplay(window_name, wait_ms)
    return HeadlessDisplay()
