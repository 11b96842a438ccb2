"""Core utilities and configuration."""

from fastpress.core.config import Settings, get_settings
from fastpress.core.database import Base, db_manager, get_session, transaction
from fastpress.core.logging import db_logger, get_logger, import_logger, setup_logging

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Database
    "Base",
    "db_manager",
    "get_session",
    "transaction",
    # Logging
    "db_logger",
    "get_logger",
    "import_logger",
    "setup_logging",
]
