"""Constants shared across the client."""

VERSION = "0.1.0"

API_ROOT = "https://simple-note.appspot.com"
AUTH_PATH = "/api/login"
DATA_PATH = "/api2/data"
INDEX_PATH = "/api2/index"

NOTE_KEY_LENGTH = 32
INDEX_PAGE_LENGTH = 100

DEFAULT_FETCH_TIMEOUT = 10
DEFAULT_REQUEST_TIMEOUT = 30
DEFAULT_MAX_WORKERS = 16

MARKDOWN_SYSTEM_TAG = "markdown"
