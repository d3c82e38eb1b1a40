"""Configuration for PartSight MCP server."""

import os

# Server settings
HTTP_PORT = int(os.getenv("HTTP_PORT", "8080"))
RATE_LIMIT_REQUESTS = int(os.getenv("RATE_LIMIT_REQUESTS", "100"))

# Vision analysis service (label + text detection). Empty URL disables image tools.
VISION_API_URL = os.getenv("VISION_API_URL", "").rstrip("/")
VISION_API_KEY = os.getenv("VISION_API_KEY", "")
VISION_MIN_CONFIDENCE = float(os.getenv("VISION_MIN_CONFIDENCE", "70"))
VISION_MAX_LABELS = int(os.getenv("VISION_MAX_LABELS", "20"))
VISION_REQUEST_TIMEOUT = float(os.getenv("VISION_REQUEST_TIMEOUT", "10.0"))

# Request settings
MAX_RETRIES = 3

# Tool input limits
MAX_DETECTIONS = 500  # Max labels or text detections accepted per tool call
MAX_IMAGE_BYTES = 5 * 1024 * 1024  # Matches the upstream inline-bytes limit
MAX_TEXT_LENGTH = 200  # Max characters per label name or detected text
