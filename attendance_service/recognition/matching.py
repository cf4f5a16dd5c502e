"""
Template matching module.

Matches a detected face region against the registered face templates
using histogram correlation.

Every region is scored against every record, so the cost per frame is
O(records x regions). Histogram correlation has no index, so this is the
scaling limit of the design.
"""

import numpy as np
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING
from ..config import Config
from .preprocessing import normalize_face
from .similarity import score as histogram_score

if TYPE_CHECKING:
    from ..face_store import FaceRecord, FaceStore


@dataclass(frozen=True)
class Recognition:
    """Outcome of recognizing one face region."""

    record: Optional['FaceRecord']
    score: float

    @property
    def is_known(self) -> bool:
        return self.record is not None

    @property
    def name(self) -> Optional[str]:
        return self.record.name if self.record is not None else None


UNKNOWN = Recognition(record=None, score=0.0)


def recognize(
    face_region: np.ndarray,
    store: 'FaceStore',
    config: Config
) -> Recognition:
    """
    Recognize a face region against the store.

    Args:
        face_region: Face pixels cut out of a grayscale frame
        store: Registered face templates
        config: Service configuration

    Returns:
        Recognition with the best record, or UNKNOWN when the store is
        empty or the best score does not exceed the threshold.

    Ties are broken in favour of the earliest record.
    """
    if len(store) == 0:
        return UNKNOWN

    template = normalize_face(face_region, config.template_size)

    scores = [
        histogram_score(template, record.template, config.histogram_bins)
        for record in store
    ]

    # argmax returns the first occurrence of the maximum
    best_idx = int(np.argmax(scores))
    best_score = scores[best_idx]

    if best_score > config.recognition_threshold:
        return Recognition(record=store[best_idx], score=best_score)

    return Recognition(record=None, score=best_score)
