"""
Database Session Management
"""
from atams.db.session import create_session_factory, get_db_factory

from app.core.config import settings

# Session factory with the pool settings from DB_POOL_* variables
SessionLocal = create_session_factory(settings)

# Database session dependency
get_db = get_db_factory(SessionLocal)
