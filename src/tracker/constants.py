"""Constants for the issue tracker adapter."""

# Remote API
DEFAULT_HOST = "https://gitlab.com"
API_PATH = "/api/v4"
ISSUE_PATH_TEMPLATE = "/projects/{project}/issues/{issue}"
USERS_PATH = "/users"
ISSUE_URL_TEMPLATE = "{host}/{repository}/-/issues/"

# Authentication
AUTH_TOKEN_ENV_VAR = "AUTH_TOKEN"
AUTH_HEADER = "Authorization"
AUTH_SCHEME = "token"

# Cache subdirectory name; callers depend on this exact literal
CACHE_SUBDIRECTORY = "github"

# Logging
COMPONENT_TRACKER = "tracker"
