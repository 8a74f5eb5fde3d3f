"""FastAPI dependencies: authentication, throttling and paging parameters."""
import logging
from typing import Callable, Optional

from fastapi import Depends, Query, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from eventhub.database import get_db
from eventhub.exceptions import Forbidden, InvalidInput, Unauthenticated
from eventhub.models.user import User
from eventhub.schemas.page import PageRequest
from eventhub.security.tokens import token_issuer

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

MAX_PAGE_SIZE = 100


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the bearer token to a user or fail with 401."""
    if credentials is None:
        raise Unauthenticated("Authentication required")
    user_id = token_issuer.extract_subject(credentials.credentials)
    user = db.query(User).filter(User.user_id == user_id).first()
    if not user:
        raise Unauthenticated("Token subject no longer exists")
    return user


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """Like ``get_current_user`` but an absent or invalid token means anonymous."""
    if credentials is None or not token_issuer.validate(credentials.credentials):
        return None
    user_id = token_issuer.extract_subject(credentials.credentials)
    return db.query(User).filter(User.user_id == user_id).first()


def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise Forbidden("Access denied")
    return user


def client_key(request: Request) -> str:
    """Throttle key: the token subject when a valid bearer token is sent, else the remote address."""
    auth = request.headers.get("Authorization", "")
    scheme, _, token = auth.partition(" ")
    if scheme.lower() == "bearer" and token_issuer.validate(token):
        return f"user:{token_issuer.extract_subject(token)}"
    host = request.client.host if request.client else "unknown"
    return f"ip:{host}"


def throttle_request(request: Request) -> None:
    request.app.state.throttle.hit(client_key(request))


def page_params(default_sort: str) -> Callable[..., PageRequest]:
    """Build a dependency parsing ``page``, ``size`` and ``sort=field[,asc|desc]``."""

    def dependency(
        page: int = Query(0, ge=0),
        size: int = Query(20, ge=1, le=MAX_PAGE_SIZE),
        sort: Optional[str] = Query(None, description="field[,asc|desc]"),
    ) -> PageRequest:
        if not sort or not sort.strip():
            return PageRequest(page=page, size=size, sort=default_sort)
        field, _, direction = sort.partition(",")
        direction = direction.strip().lower() or "asc"
        if direction not in ("asc", "desc"):
            raise InvalidInput(f"Invalid sort direction '{direction}'")
        return PageRequest(page=page, size=size, sort=field.strip(), descending=direction == "desc")

    return dependency
