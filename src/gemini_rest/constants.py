"""
Project-wide constants for the Gemini REST client
"""  # noqa: D200, D212, D415

# ==============================================================================
# Endpoints
# ==============================================================================

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
API_VERSION = "v1beta"

# Upload and download live beside the versioned API root, not under it
UPLOAD_PATH = f"/upload/{API_VERSION}/files"
DOWNLOAD_PATH = f"/download/{API_VERSION}"

# ==============================================================================
# Models
# ==============================================================================

DEFAULT_MODEL = "models/gemini-2.5-flash"
DEFAULT_EMBEDDING_MODEL = "models/text-embedding-004"
MODEL_PREFIX = "models/"

# ==============================================================================
# Network
# ==============================================================================

NETWORK_TIMEOUT = 60.0  # seconds

# ==============================================================================
# Batch jobs
# ==============================================================================

DEFAULT_BATCH_DISPLAY_NAME = "gemini-rest-batch"
DEFAULT_POLL_INTERVAL = 5.0  # seconds

# ==============================================================================
# Streaming
# ==============================================================================

SSE_DATA_PREFIX = "data:"
SSE_DONE_SENTINEL = "[DONE]"

# ==============================================================================
# Context caching
# ==============================================================================

MAX_CACHE_DISPLAY_NAME_CHARS = 128

# ==============================================================================
# Files
# ==============================================================================

DEFAULT_MIME_TYPE = "application/octet-stream"
