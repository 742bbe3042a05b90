"""Base configuration shared by every environment."""
import os
from datetime import timedelta

class Config:
    """Base configuration."""
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = False
    
    # JWT Configuration
    JWT_SECRET_KEY = os.environ.get('JWT_SECRET_KEY') or 'jwt-secret-key-change-in-production'
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=2)
    JWT_ALGORITHM = 'HS256'
    
    # CORS
    CORS_ORIGINS = ["http://localhost:5173", "http://localhost:3000"]
    
    # Rate Limiting
    RATELIMIT_STORAGE_URI = os.environ.get('REDIS_URL') or 'memory://'
    RATELIMIT_ENABLED = True
    MARK_ATTENDANCE_RATE_LIMIT = "10 per minute"
    
    # Face matching (Euclidean distance, lower = stricter)
    FACE_MATCH_THRESHOLD = 0.6
    
    # Geofence, meters
    DEFAULT_ATTENDANCE_RADIUS = 50
    MIN_ATTENDANCE_RADIUS = 10
    MAX_ATTENDANCE_RADIUS = 500
    
    # Marking window, minutes
    LATE_GRACE_MINUTES = 10
    END_GRACE_MINUTES = 5
    
    # Logging
    LOG_LEVEL = 'INFO'
    LOG_FILE = 'logs/app.log'
