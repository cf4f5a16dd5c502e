"""
Histogram similarity module.

Scores two normalized face templates by correlating their intensity
histograms.
"""

import cv2
import numpy as np


def compute_histogram(image: np.ndarray, bins: int = 256) -> np.ndarray:
    """
    Compute the intensity histogram of a single-channel image.

    Args:
        image: Single-channel 8-bit image
        bins: Number of buckets spanning [0, 256)

    Returns:
        Histogram as a (bins, 1) float32 array
    """
    return cv2.calcHist([image], [0], None, [bins], [0, 256])


def score(image_a: np.ndarray, image_b: np.ndarray, bins: int = 256) -> float:
    """
    Correlate the histograms of two templates.

    Both images must be single-channel and of the same size; callers
    normalize first.

    Args:
        image_a: First template
        image_b: Second template
        bins: Number of histogram buckets

    Returns:
        Correlation coefficient in about [-1, 1], higher is more similar

    Raises:
        ValueError: If the images are not comparable
    """
    if image_a.ndim != 2 or image_b.ndim != 2:
        raise ValueError('Templates must be single-channel images')
    if image_a.shape != image_b.shape:
        raise ValueError(
            f'Template sizes differ: {image_a.shape} vs {image_b.shape}'
        )

    hist_a = compute_histogram(image_a, bins)
    hist_b = compute_histogram(image_b, bins)

    return float(cv2.compareHist(hist_a, hist_b, cv2.HISTCMP_CORREL))
