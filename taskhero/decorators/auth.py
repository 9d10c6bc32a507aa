"""
Access decorators for TaskHero managers.

Manager methods receive the acting UserSession explicitly. These
decorators find that argument and reject the call before any storage
round-trip when it is missing or lacks the administrator role. Row-level
security in the database stays the final authority.
"""

import functools
from typing import Any, Callable, Optional

from ..auth.models import UserSession
from ..errors import AuthenticationRequiredError, AuthorizationError


def _find_session(args: tuple, kwargs: dict) -> Optional[UserSession]:
    """Locate the UserSession among a call's arguments."""
    session = kwargs.get("session")
    if isinstance(session, UserSession):
        return session

    for arg in args:
        if isinstance(arg, UserSession):
            return arg

    return None


def require_session(func: Callable) -> Callable:
    """
    Decorator to require an authenticated session for a manager method.

    Example:
        ```python
        class TaskManager:
            @require_session
            async def list(self, session: UserSession) -> List[Task]:
                ...
        ```

    Raises:
        AuthenticationRequiredError: If no UserSession was passed
    """

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        if _find_session(args, kwargs) is None:
            raise AuthenticationRequiredError("User not authenticated")
        return await func(*args, **kwargs)

    return wrapper


def require_admin(func: Callable) -> Callable:
    """
    Decorator to require an administrator session for a manager method.

    Raises:
        AuthenticationRequiredError: If no UserSession was passed
        AuthorizationError: If the session's role is not admin
    """

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        session = _find_session(args, kwargs)
        if session is None:
            raise AuthenticationRequiredError("User not authenticated")
        if not session.is_admin:
            raise AuthorizationError(
                f"Administrator role required for {func.__name__}"
            )
        return await func(*args, **kwargs)

    return wrapper
