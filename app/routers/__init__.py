# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - contacts.py: Contact CRUD and login endpoints
#
# Each router is mounted in main.py.
# =============================================================================

from . import contacts
from . import health

__all__ = [
    "contacts",
    "health",
]
