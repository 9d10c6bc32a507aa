"""
TaskHero decorators module.

Provides session and role checks for manager methods.
"""

from .auth import require_admin, require_session

__all__ = [
    "require_admin",
    "require_session",
]
