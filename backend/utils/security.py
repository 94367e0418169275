import logging

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from database import get_db
from models.user import Identity
from utils.errors import Unauthenticated, ValidationFailed
from utils.guards import parse_object_id
from utils.jwt import TokenError, TokenManager
from utils.users import find_by_id

logger = logging.getLogger(__name__)

# auto_error=False so a missing header gets our 401 payload
security = HTTPBearer(auto_error=False)


def get_token_manager(request: Request) -> TokenManager:
    return request.app.state.token_manager


async def get_current_identity(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    tokens: TokenManager = Depends(get_token_manager),
) -> Identity:
    if credentials is None or not credentials.credentials:
        raise Unauthenticated("Not authenticated")

    try:
        payload = tokens.verify(credentials.credentials)
    except TokenError as exc:
        logger.info("TOKEN_REJECTED reason=%s path=%s", exc.reason, request.url.path)
        raise Unauthenticated("Invalid or expired token")

    identity = Identity(id=str(payload["sub"]), email=payload["email"])

    # request-scoped only
    request.state.identity = identity
    return identity


async def get_current_user(
    identity: Identity = Depends(get_current_identity),
    db=Depends(get_db),
) -> dict:
    try:
        user_id = parse_object_id(identity.id, "user id")
    except ValidationFailed:
        raise Unauthenticated("Invalid token payload")

    user = await find_by_id(db, user_id)
    if not user:
        raise Unauthenticated("User not found")

    return user
