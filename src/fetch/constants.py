"""HTTP constants for the fetch layer."""

# HTTP Status Code Ranges
HTTP_STATUS_OK_MIN = 200
HTTP_STATUS_OK_MAX = 300
HTTP_STATUS_NOT_MODIFIED = 304

# Request defaults
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_USER_AGENT = "issue-tracker-adapter/0.1.0"
DEFAULT_ACCEPT = "application/json"

# On-disk cache entries
CACHE_FILE_SUFFIX = ".json"
