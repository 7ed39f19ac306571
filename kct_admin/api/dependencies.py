"""
Dependency Injection
FastAPI dependencies for the database session, edge function client and API key.
"""

import logging
from typing import Generator, Optional

from fastapi import Depends, Header, Request, status
from sqlalchemy.orm import Session

from ..config.settings import Settings, get_settings
from ..functions import EdgeFunctionClient
from .errors import APIError, UnauthorizedError

logger = logging.getLogger(__name__)


def get_db() -> Generator[Session, None, None]:
    """
    Get database session.

    Use as FastAPI dependency:
        @router.get("/endpoint")
        def endpoint(db: Session = Depends(get_db)):
            ...
    """
    from ..db.session import SessionLocal

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_function_client() -> Generator[EdgeFunctionClient, None, None]:
    """Edge function client, closed after the request."""
    client = EdgeFunctionClient()
    try:
        yield client
    finally:
        client.close()


def verify_api_key(
    settings: Settings = Depends(get_settings), x_api_key: Optional[str] = Header(None)
) -> bool:
    """
    Verify the X-API-Key header when API_REQUIRE_KEY is set.

    Use as a router dependency:
        APIRouter(dependencies=[Depends(verify_api_key)])
    """
    if not settings.require_api_key:
        return True

    if not x_api_key:
        raise UnauthorizedError("API key is required")

    if x_api_key not in settings.api_keys:
        logger.warning("Rejected request with an unknown API key")
        raise APIError("Invalid API key", status_code=status.HTTP_403_FORBIDDEN)

    return True


def get_request_id(request: Request) -> str:
    """Request ID assigned by RequestLoggingMiddleware."""
    return getattr(request.state, "request_id", None) or request.headers.get("X-Request-ID", "-")
