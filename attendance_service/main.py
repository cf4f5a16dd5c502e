"""
Attendance Service - Main Entry Point

Console menu around the attendance and enrollment loops:
1. Take Attendance
2. Register New Face
3. Exit
"""

import os
import sys
import argparse
import dataclasses
import threading
from pathlib import Path
from typing import List, Optional
from .config import Config, load_config
from .camera import connect_camera
from .display import create_display
from .face_store import validate_identity_name
from .session import AttendanceSession, build_session
from .video_loop import run_attendance, run_enrollment
from .app import create_app
from .logging_config import setup_logging, set_log_mode, get_logger

logger = get_logger(__name__)

MODE_ATTEND = 'attend'
MODE_ENROLL = 'enroll'
MODE_EXIT = 'exit'

MENU_CHOICES = {
    1: MODE_ATTEND,
    2: MODE_ENROLL,
    3: MODE_EXIT,
}

MENU_TEXT = '\n1. Take Attendance\n2. Register New Face\n3. Exit'


def _load_local_env(env_path: Path = Path('.env')) -> None:
    """Load environment variables from a .env file in the working directory if present."""
    if not env_path.exists():
        return

    for raw_line in env_path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        key, value = line.split('=', 1)
        os.environ.setdefault(key.strip(), value.strip())


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='Attendance Service - Webcam Face Attendance'
    )

    parser.add_argument(
        '--mode',
        choices=['menu', MODE_ATTEND, MODE_ENROLL],
        default='menu',
        help='Skip the menu and start a mode directly'
    )

    parser.add_argument(
        '--name',
        type=str,
        help='Name of the face to register (enroll mode)'
    )

    parser.add_argument(
        '--faces-dir',
        type=str,
        help='Folder of registered face images (or set FACES_DIR)'
    )

    parser.add_argument(
        '--attendance-file',
        type=str,
        help='Attendance CSV file (or set ATTENDANCE_FILE)'
    )

    parser.add_argument(
        '--camera',
        type=str,
        help='Camera index or stream URL (or set CAMERA_SOURCE)'
    )

    parser.add_argument(
        '--threshold',
        type=float,
        help='Recognition threshold (or set RECOGNITION_THRESHOLD)'
    )

    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging'
    )

    args = parser.parse_args(argv)

    if args.name is not None:
        try:
            args.name = validate_identity_name(args.name)
        except ValueError as e:
            parser.error(f'Invalid --name: {e}')

    return args


def apply_overrides(config: Config, args: argparse.Namespace) -> Config:
    """Return config with command line values applied."""
    overrides = {}
    if args.faces_dir:
        overrides['faces_dir'] = args.faces_dir
    if args.attendance_file:
        overrides['attendance_file'] = args.attendance_file
    if args.camera:
        overrides['camera_source'] = args.camera
    if args.threshold is not None:
        overrides['recognition_threshold'] = args.threshold
    if args.debug:
        overrides['debug_mode'] = True

    return dataclasses.replace(config, **overrides) if overrides else config


def choose_mode() -> str:
    """
    Show the menu and read one integer choice.

    Returns:
        One of MODE_ATTEND, MODE_ENROLL, MODE_EXIT, or '' when invalid
    """
    print(MENU_TEXT)
    raw = input('Enter choice: ').strip()
    try:
        return MENU_CHOICES.get(int(raw), '')
    except ValueError:
        return ''


def prompt_name() -> str:
    """Ask for a name until a valid one is entered."""
    while True:
        raw = input('Enter name for new face (no spaces): ')
        try:
            return validate_identity_name(raw)
        except ValueError as e:
            print(f'Invalid name: {e}')


def start_preview_server(session: AttendanceSession) -> threading.Thread:
    """
    Start the Flask preview server in a background thread.

    Args:
        session: Session whose preview buffer and log are served

    Returns:
        The started daemon thread
    """
    config = session.config
    app = create_app(config, session.preview, session.attendance_log)

    def _serve() -> None:
        app.run(
            host='0.0.0.0',
            port=config.preview_port,
            threaded=True,
            debug=False,
            use_reloader=False
        )

    thread = threading.Thread(target=_serve, daemon=True, name='preview-server')
    thread.start()
    logger.info(f'Preview stream: http://localhost:{config.preview_port}/video_feed')
    return thread


def run_mode(session: AttendanceSession, mode: str, capture, name: Optional[str] = None) -> None:
    """Run one of the camera modes until it finishes."""
    config = session.config
    set_log_mode(mode)

    if mode == MODE_ATTEND:
        display = create_display('Attendance System', config.show_window, config.key_wait_ms)
        try:
            run_attendance(session, capture, display)
        finally:
            display.close()

    elif mode == MODE_ENROLL:
        # The capture key is only read from the window
        if not config.show_window:
            logger.error('Registering a face needs the camera window; set SHOW_WINDOW=true.')
            return

        name = name or prompt_name()
        display = create_display(
            f"Capture Face - Press '{config.capture_key}' to capture",
            config.show_window,
            config.key_wait_ms
        )
        try:
            run_enrollment(session, capture, display, name)
        except OSError as e:
            logger.error(f'❌ {e}')
        finally:
            display.close()


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point."""
    _load_local_env()
    args = parse_args(argv)
    config = apply_overrides(load_config(), args)

    setup_logging('menu', config.debug_mode)

    logger.info('=== Smart Attendance System ===')
    logger.info(f'Faces: {config.faces_dir}')
    logger.info(f'Attendance file: {config.attendance_file}')
    logger.info(f'Recognition threshold: {config.recognition_threshold}')

    try:
        session = build_session(config)
    except RuntimeError as e:
        logger.error(str(e))
        sys.exit(1)

    if session.preview is not None:
        start_preview_server(session)

    try:
        capture = connect_camera(config)
    except RuntimeError as e:
        logger.error(str(e))
        sys.exit(1)

    try:
        mode = args.mode if args.mode != 'menu' else choose_mode()

        if mode == MODE_EXIT:
            print('Exiting...')
        elif mode in (MODE_ATTEND, MODE_ENROLL):
            run_mode(session, mode, capture, args.name)
        else:
            print('Invalid choice.')

    except KeyboardInterrupt:
        logger.info('Received keyboard interrupt, shutting down...')
    except Exception as e:
        logger.error(f'Fatal error: {e}', exc_info=True)
        sys.exit(1)
    finally:
        capture.release()
        logger.info('Camera released')


if __name__ == '__main__':
    main()
