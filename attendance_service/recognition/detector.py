"""
Face detection module.

Thin wrapper around an OpenCV Haar cascade.
"""

import cv2
import numpy as np
from typing import List
from ..config import Config
from ..logging_config import get_logger
from .preprocessing import Region

logger = get_logger(__name__)


class FaceDetector:
    """
    Haar cascade face detector.

    Raises RuntimeError on construction if the cascade cannot be loaded,
    which is fatal for the whole run.
    """

    def __init__(self, config: Config):
        """
        Load the cascade.

        Args:
            config: Service configuration

        Raises:
            RuntimeError: If the cascade file cannot be loaded
        """
        self.config = config
        self._cascade = cv2.CascadeClassifier()

        if not self._cascade.load(config.cascade_path):
            raise RuntimeError(f'Error loading face cascade classifier: {config.cascade_path}')

        logger.debug(f'Face cascade loaded from {config.cascade_path}')

    def detect(self, gray: np.ndarray) -> List[Region]:
        """
        Detect faces in a grayscale frame.

        Args:
            gray: Grayscale frame

        Returns:
            List of (x, y, width, height) regions
        """
        faces = self._cascade.detectMultiScale(
            gray,
            scaleFactor=self.config.detect_scale_factor,
            minNeighbors=self.config.detect_min_neighbors,
            minSize=self.config.detect_min_size,
        )
        return [tuple(int(v) for v in face) for face in faces]
