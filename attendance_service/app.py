"""
Flask application for the preview HTTP API.

Provides:
- GET /video_feed: MJPEG stream of the annotated camera frames
- GET /health: Service health check
- GET /attendance: Attendance records of a day (default today)
"""

from datetime import datetime
from flask import Flask, Response, jsonify, request
from flask_cors import CORS
from .config import Config
from .attendance_log import AttendanceLog
from .streaming import PreviewBuffer, generate_mjpeg_frames
from .utils.timing import DATE_FORMAT
from .logging_config import get_logger

logger = get_logger(__name__)


def create_app(config: Config, preview: PreviewBuffer, attendance_log: AttendanceLog) -> Flask:
    """
    Create and configure Flask application.

    Args:
        config: Service configuration
        preview: Buffer the video loop writes annotated frames to
        attendance_log: Log to read records from

    Returns:
        Configured Flask app
    """
    app = Flask(__name__)
    CORS(app)

    @app.route('/video_feed')
    def video_feed():
        """Stream MJPEG video feed."""
        return Response(
            generate_mjpeg_frames(preview),
            mimetype='multipart/x-mixed-replace; boundary=frame'
        )

    @app.route('/health')
    def health():
        """Health check endpoint."""
        return jsonify({
            'status': 'ok',
            'streaming': preview.is_streaming(),
            'cameraSource': config.camera_source,
            'attendanceFile': attendance_log.path,
        })

    @app.route('/attendance')
    def attendance():
        """Records of one day, ?date=DD-MM-YYYY."""
        day = request.args.get('date') or datetime.now().strftime(DATE_FORMAT)
        try:
            datetime.strptime(day, DATE_FORMAT)
        except ValueError:
            return jsonify({'error': f'Invalid date {day!r}, expected DD-MM-YYYY'}), 400

        records = attendance_log.read_records(on_date=day)
        return jsonify({
            'date': day,
            'count': len(records),
            'records': [r.to_dict() for r in records],
        })

    return app
