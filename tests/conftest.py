"""Shared fixtures: temporary config, synthetic images, fake camera pieces."""

import dataclasses
from datetime import datetime

import cv2
import numpy as np
import pytest

from attendance_service.config import load_config
from attendance_service.face_store import FaceStore
from attendance_service.attendance_log import AttendanceLog
from attendance_service.session import AttendanceSession


def uniform_face(seed: int = 0, side: int = 160) -> np.ndarray:
    """
    Grayscale image in which every intensity appears equally often.

    equalizeHist leaves such an image unchanged, so a frame built from it
    reaches the recognizer with exactly the pixels stored on disk.
    """
    count = side * side // 256
    values = np.repeat(np.arange(256, dtype=np.uint8), count)
    return np.random.default_rng(seed).permutation(values).reshape(side, side)


def band_image(low: int, high: int, seed: int = 0, side: int = 100) -> np.ndarray:
    """Grayscale noise restricted to [low, high)."""
    rng = np.random.default_rng(seed)
    return rng.integers(low, high, size=(side, side), dtype=np.uint8)


def as_bgr(gray: np.ndarray) -> np.ndarray:
    return cv2.cvtColor(gray, cv2.COLOR_GRAY2BGR)


class FakeDetector:
    """Returns the same regions for every frame and records calls."""

    def __init__(self, regions=None):
        self.regions = list(regions or [])
        self.calls = 0

    def detect(self, gray):
        self.calls += 1
        return list(self.regions)


class FakeCapture:
    """Plays a fixed list of frames, then reports end of stream."""

    def __init__(self, frames):
        self.frames = list(frames)
        self.reads = 0
        self.released = False

    def read(self):
        self.reads += 1
        if not self.frames:
            return False, None
        return True, self.frames.pop(0).copy()

    def release(self):
        self.released = True


class FakeDisplay:
    """Returns scripted keys, one per shown frame, then None."""

    def __init__(self, keys=None):
        self.keys = list(keys or [])
        self.shown = 0
        self.closed = False

    def show(self, frame):
        self.shown += 1
        return self.keys.pop(0) if self.keys else None

    def close(self):
        self.closed = True


@pytest.fixture
def faces_dir(tmp_path):
    path = tmp_path / 'faces'
    path.mkdir()
    return path


@pytest.fixture
def config(tmp_path, faces_dir, monkeypatch):
    for var in ('FACES_DIR', 'FACE_IMAGE_EXT', 'ATTENDANCE_FILE', 'RECOGNITION_THRESHOLD',
                'PREVIEW_PORT', 'ATTENDANCE_WEBHOOK_URL', 'SHOW_WINDOW'):
        monkeypatch.delenv(var, raising=False)

    return dataclasses.replace(
        load_config(),
        faces_dir=str(faces_dir),
        face_image_ext='.png',
        attendance_file=str(tmp_path / 'attendance.csv'),
        show_window=False,
    )


@pytest.fixture
def fixed_clock():
    return lambda: datetime(2024, 3, 7, 9, 5, 3)


@pytest.fixture
def make_session(config, fixed_clock):
    def _make(store=None, detector=None, **overrides):
        cfg = dataclasses.replace(config, **overrides) if overrides else config
        return AttendanceSession(
            config=cfg,
            detector=detector or FakeDetector(),
            store=store if store is not None else FaceStore(cfg),
            attendance_log=AttendanceLog(cfg.attendance_file),
            clock=fixed_clock,
        )
    return _make
