# Imported so Alembic autogenerate sees every table on Base.metadata
from .base import Base
from .report import Report

__all__ = ["Base", "Report"]
