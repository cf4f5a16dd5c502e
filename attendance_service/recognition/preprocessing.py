"""
Image preprocessing module.

Brings frames and face regions into the form the recognizer compares:
1. Grayscale conversion
2. Histogram equalization (detection frames only)
3. Region cropping
4. Resize to the fixed template size
"""

import cv2
import numpy as np
from typing import Tuple

Region = Tuple[int, int, int, int]


def to_grayscale(image: np.ndarray) -> np.ndarray:
    """
    Convert a BGR (or already single-channel) image to grayscale.

    Args:
        image: Image in BGR or grayscale format

    Returns:
        Single-channel image
    """
    if image.ndim == 2:
        return image
    if image.shape[2] == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2GRAY)
    return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)


def prepare_for_detection(frame_bgr: np.ndarray, equalize: bool = True) -> np.ndarray:
    """
    Prepare a camera frame for cascade detection.

    Args:
        frame_bgr: Camera frame
        equalize: Apply histogram equalization to the grayscale frame

    Returns:
        Grayscale frame, equalized when requested
    """
    gray = to_grayscale(frame_bgr)
    if equalize:
        gray = cv2.equalizeHist(gray)
    return gray


def crop_region(gray: np.ndarray, region: Region) -> np.ndarray:
    """
    Cut a face region out of a grayscale frame.

    The region is clipped to the frame bounds; an empty intersection
    falls back to the whole frame.

    Args:
        gray: Grayscale frame
        region: (x, y, width, height)

    Returns:
        Copy of the region pixels
    """
    x, y, w, h = (int(v) for v in region)
    height, width = gray.shape[:2]

    x1, y1 = max(0, x), max(0, y)
    x2, y2 = min(width, x + w), min(height, y + h)

    if x2 <= x1 or y2 <= y1:
        return gray.copy()

    return gray[y1:y2, x1:x2].copy()


def normalize_face(face: np.ndarray, size: Tuple[int, int]) -> np.ndarray:
    """
    Normalize a face image into a template.

    Args:
        face: Face image (grayscale or BGR)
        size: Target (width, height)

    Returns:
        Single-channel image of exactly `size`
    """
    gray = to_grayscale(face)
    if (gray.shape[1], gray.shape[0]) == tuple(size):
        return gray.copy()
    return cv2.resize(gray, tuple(size))
