"""
Attendance Service - Webcam Face Attendance

Detects faces in a webcam feed, matches them against registered face
images by histogram correlation and logs first sightings to a CSV file.
"""

__version__ = "1.0.0"
__author__ = "Attendance Service Team"
