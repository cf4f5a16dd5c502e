"""
Recognition algorithms package.

Contains modules for:
- Image preprocessing
- Face detection
- Histogram similarity
- Template matching
- Session presence
"""

from .preprocessing import to_grayscale, prepare_for_detection, crop_region, normalize_face
from .similarity import compute_histogram, score
from .detector import FaceDetector
from .matching import Recognition, UNKNOWN, recognize
from .presence import SessionTracker

__all__ = [
    'to_grayscale',
    'prepare_for_detection',
    'crop_region',
    'normalize_face',
    'compute_histogram',
    'score',
    'FaceDetector',
    'Recognition',
    'UNKNOWN',
    'recognize',
    'SessionTracker',
]
