"""
TaskHero auth module.

Handles sessions, profiles and invitation-based registration.
"""

from .models import RegistrationResult, UserProfile, UserRole, UserSession
from .profiles import ProfileManager
from .registration import RegistrationManager
from .sessions import SessionManager

__all__ = [
    "ProfileManager",
    "RegistrationManager",
    "SessionManager",
    "RegistrationResult",
    "UserProfile",
    "UserRole",
    "UserSession",
]
