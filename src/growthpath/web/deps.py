"""Request dependencies: the signed-in session and role gates."""

from __future__ import annotations

from typing import Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from growthpath.core.accounts import AuthenticationError, Session, resolve_session

bearer_scheme = HTTPBearer(auto_error=False)


def get_session(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Session:
    """Resolve the bearer token into the current Session."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return resolve_session(credentials.credentials)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


def require_role(role: str) -> Callable[[Session], Session]:
    """Build a dependency that admits only sessions with the given role."""

    def dependency(session: Session = Depends(get_session)) -> Session:
        if session.role != role:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Only for {role}s",
            )
        return session

    return dependency


require_student = require_role("student")
require_instructor = require_role("instructor")
