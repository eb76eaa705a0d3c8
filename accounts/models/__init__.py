"""
models/__init__.py
------------------
Re-export all models so create_tables.py (and Alembic, if added) can import
Base and discover all tables via a single import:

    from accounts.models import Base
"""

from accounts.db.base import Base
from accounts.models.company import Company
from accounts.models.membership import Membership
from accounts.models.user import User

__all__ = ["Base", "Company", "Membership", "User"]
