"""
API Dependencies
Provides authentication and authorization dependencies using ATAMS factory pattern
"""
from fastapi import Header
from atams.sso import create_atlas_client, create_auth_dependencies
from atams.exceptions import ForbiddenException

from app.core.config import settings

# Initialize Atlas SSO client using factory
atlas_client = create_atlas_client(settings)

# Create auth dependencies using factory
get_current_user, require_auth, require_min_role_level, require_role_level = create_auth_dependencies(atlas_client)


def require_cron_key(x_cron_key: str = Header(..., alias="X-Cron-Key")) -> None:
    """Scheduled jobs authenticate with the X-Cron-Key header"""
    if x_cron_key != settings.CRON_API_KEY:
        raise ForbiddenException("Invalid cron API key")


# Export for use in endpoints
__all__ = [
    "atlas_client",
    "get_current_user",
    "require_auth",
    "require_min_role_level",
    "require_role_level",
    "require_cron_key",
]
