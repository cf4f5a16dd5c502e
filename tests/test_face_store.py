import dataclasses
import logging

import cv2
import numpy as np
import pytest

from attendance_service.face_store import (
    FaceStore,
    load_face_store,
    name_from_path,
    validate_identity_name,
)
from conftest import band_image


def _write(path, image):
    assert cv2.imwrite(str(path), image)


def test_load_assigns_ids_in_filename_order(config, faces_dir):
    for name in ('carol', 'alice', 'bob'):
        _write(faces_dir / f'{name}.png', band_image(0, 256, side=120))

    store = load_face_store(config)

    assert [(r.name, r.id) for r in store] == [('alice', 1), ('bob', 2), ('carol', 3)]
    assert all(r.template.shape == (100, 100) for r in store)
    assert all(r.template.ndim == 2 for r in store)


def test_load_skips_undecodable_files(config, faces_dir, caplog):
    _write(faces_dir / 'alice.png', band_image(0, 256))
    (faces_dir / 'broken.png').write_bytes(b'not an image')
    _write(faces_dir / 'zed.png', band_image(0, 256))

    with caplog.at_level(logging.WARNING):
        store = FaceStore.load(str(faces_dir), config)

    assert [(r.name, r.id) for r in store] == [('alice', 1), ('zed', 2)]
    assert 'broken.png' in caplog.text


def test_load_only_matches_configured_extension(config, faces_dir):
    _write(faces_dir / 'alice.png', band_image(0, 256))
    _write(faces_dir / 'bob.jpg', band_image(0, 256))
    (faces_dir / 'notes.txt').write_text('hello')

    jpg_config = dataclasses.replace(config, face_image_ext='.jpg')

    assert [r.name for r in load_face_store(jpg_config)] == ['bob']
    assert [r.name for r in load_face_store(config)] == ['alice']


def test_load_empty_directory(config):
    assert len(load_face_store(config)) == 0


def test_load_missing_directory(config, tmp_path):
    assert len(FaceStore.load(str(tmp_path / 'missing'), config)) == 0


def test_add_continues_ids_and_saves_image(config, faces_dir):
    _write(faces_dir / 'alice.png', band_image(0, 256))
    store = load_face_store(config)
    frame = np.zeros((48, 64, 3), dtype=np.uint8)

    record = store.add('bob', band_image(0, 256), frame)

    assert record.id == 2
    assert store[1] is record
    saved = cv2.imread(str(faces_dir / 'bob.png'))
    assert saved is not None
    assert saved.shape == (48, 64, 3)


def test_add_allows_duplicate_names(config):
    store = FaceStore(config)
    frame = np.zeros((10, 10, 3), dtype=np.uint8)

    first = store.add('alice', band_image(0, 256), frame)
    second = store.add('alice', band_image(0, 256), frame)

    assert (first.id, second.id) == (1, 2)
    assert len(store.find_by_name('alice')) == 2


def test_add_creates_missing_faces_dir(config, tmp_path):
    cfg = dataclasses.replace(config, faces_dir=str(tmp_path / 'new' / 'faces'))
    store = FaceStore(cfg)

    store.add('dave', band_image(0, 256), np.zeros((10, 10, 3), dtype=np.uint8))

    assert (tmp_path / 'new' / 'faces' / 'dave.png').exists()


def test_failed_write_leaves_store_unchanged(config, monkeypatch):
    store = FaceStore(config)
    monkeypatch.setattr(cv2, 'imwrite', lambda path, image: False)

    with pytest.raises(OSError):
        store.add('erin', band_image(0, 256), np.zeros((10, 10, 3), dtype=np.uint8))

    assert len(store) == 0


def test_name_from_path():
    assert name_from_path('/data/faces/alice.jpg') == 'alice'
    assert name_from_path('bob.smith.png') == 'bob.smith'


@pytest.mark.parametrize('name', ['', '   ', 'two words', 'a/b', 'a\\b', 'a,b'])
def test_invalid_identity_names(name):
    with pytest.raises(ValueError):
        validate_identity_name(name)


def test_identity_name_is_stripped():
    assert validate_identity_name('  alice \n') == 'alice'


def test_add_writes_to_loaded_directory(config, faces_dir, tmp_path):
    other = tmp_path / 'other'
    other.mkdir()
    _write(other / 'alice.png', band_image(0, 256))

    store = FaceStore.load(str(other), config)
    store.add('bob', band_image(0, 256), np.zeros((10, 10, 3), dtype=np.uint8))

    assert store.image_path('bob') == str(other / 'bob.png')
    assert (other / 'bob.png').exists()
    assert not (faces_dir / 'bob.png').exists()
    assert [r.name for r in FaceStore.load(str(other), config)] == ['alice', 'bob']


def test_store_defaults_to_configured_directory(config, faces_dir):
    assert FaceStore(config).directory == str(faces_dir)


def test_unsupported_extension_raises_oserror(config, faces_dir):
    store = FaceStore(dataclasses.replace(config, face_image_ext='.xyz'))

    with pytest.raises(OSError):
        store.add('erin', band_image(0, 256), np.zeros((10, 10, 3), dtype=np.uint8))

    assert len(store) == 0
