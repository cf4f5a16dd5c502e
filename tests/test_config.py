import pytest

from attendance_service import config as config_module
from attendance_service.config import CASCADE_FILENAME, default_cascade_path, load_config

ENV_VARS = [
    'FACES_DIR', 'FACE_IMAGE_EXT', 'ATTENDANCE_FILE', 'CAMERA_SOURCE', 'CAMERA_RETRIES',
    'CASCADE_PATH', 'RECOGNITION_THRESHOLD', 'HISTOGRAM_BINS', 'CAPTURE_KEY', 'QUIT_KEY',
    'SHOW_WINDOW', 'PREVIEW_PORT', 'ATTENDANCE_WEBHOOK_URL', 'DEBUG',
]


@pytest.fixture
def clean_env(monkeypatch):
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    config = load_config()

    assert config.faces_dir == 'faces'
    assert config.face_glob == '*.jpg'
    assert config.attendance_file == 'attendance.csv'
    assert config.camera_source == '0'
    assert config.template_size == (100, 100)
    assert config.histogram_bins == 256
    assert config.recognition_threshold == 0.7
    assert (config.capture_key, config.quit_key) == ('c', 'q')
    assert config.preview_port == 0
    assert config.webhook_url == ''
    assert config.cascade_path == default_cascade_path()
    assert config.cascade_path.endswith(CASCADE_FILENAME)


def test_environment_overrides(clean_env):
    clean_env.setenv('FACES_DIR', '/srv/faces')
    clean_env.setenv('FACE_IMAGE_EXT', 'png')
    clean_env.setenv('RECOGNITION_THRESHOLD', '0.85')
    clean_env.setenv('QUIT_KEY', 'X')
    clean_env.setenv('SHOW_WINDOW', 'false')
    clean_env.setenv('DEBUG', 'TRUE')

    config = load_config()

    assert config.faces_dir == '/srv/faces'
    assert config.face_glob == '*.png'
    assert config.recognition_threshold == 0.85
    assert config.quit_key == 'x'
    assert config.show_window is False
    assert config.debug_mode is True


def test_config_is_immutable(clean_env):
    config = load_config()
    with pytest.raises(Exception):
        config.recognition_threshold = 0.1


def test_cascade_path_without_cv2_data(clean_env):
    clean_env.delattr(config_module.cv2, 'data', raising=False)

    assert default_cascade_path() == CASCADE_FILENAME
    assert load_config().cascade_path == CASCADE_FILENAME


def test_cascade_path_from_environment(clean_env):
    clean_env.setenv('CASCADE_PATH', '/opt/cascades/face.xml')

    assert load_config().cascade_path == '/opt/cascades/face.xml'
