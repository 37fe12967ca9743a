"""
FastAPI dependency injection functions.
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from supabase import Client

from eido.core.database import get_supabase_admin_client, get_user_supabase_client
from eido.core.exceptions import InvalidTokenError, app_error_to_http
from eido.core.security import decode_access_token

# Bearer token scheme for Swagger UI
bearer_scheme = HTTPBearer(auto_error=False)


def get_db(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Client:
    """Dependency: get a Supabase client acting as the caller."""
    token = credentials.credentials if credentials else ""
    return get_user_supabase_client(token)


def get_admin_db() -> Client:
    """Dependency: get the service-role Supabase client."""
    return get_supabase_admin_client()


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    """Dependency: extract and validate user_id from the Supabase access token.

    Returns:
        str: The user's UUID as string.

    Raises:
        HTTPException 401: If token is missing, invalid or expired.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        exc = app_error_to_http(InvalidTokenError())
        exc.headers = {"WWW-Authenticate": "Bearer"}
        raise exc

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access token carries no user",
        )

    return user_id
