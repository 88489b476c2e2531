"""
Application-wide constants
"""
SERVICE_NAME = "mountain-care-hr-backend"
DEFAULT_VERSION = "1.0.0"
