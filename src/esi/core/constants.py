"""
ESI Constants

Shared constants for the request engine.
"""

# =============================================================================
# ESI Configuration
# =============================================================================

ESI_BASE_URL = "https://esi.evetech.net/latest"
ESI_SWAGGER_VERSION = "1.10.1"

# Receive timeout for a single request, in seconds
REQUEST_TIMEOUT = 30.0

# =============================================================================
# Pagination
#
# ESI reports the total page count of a paginated query in X-Pages.
# Until the first page arrives the engine assumes this ceiling.
# =============================================================================

MAX_PAGES_HEADER = "X-Pages"
MAX_PAGES_DEFAULT = 1000
PAGE_OPTION = "page"

# =============================================================================
# Reserved Options
#
# Accepted on every request regardless of the endpoint schema.
# =============================================================================

DATASOURCE_OPTION = "datasource"
USER_AGENT_OPTION = "user_agent"
