# app/api/deps.py
import logging
from typing import AsyncGenerator, Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from starlette.datastructures import FormData

from app.core.config import settings
from app.middleware.error_handler import InvalidArgumentError, UnauthenticatedError
from app.schemas.token import TokenPayload

logger = logging.getLogger(__name__)

# auto_error is off so a missing token gets our own 401 body instead of
# FastAPI's default response.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="token", auto_error=False)

DEV_BYPASS_TOKEN = "dev"


def get_current_user(token: Optional[str] = Depends(oauth2_scheme)) -> TokenPayload:
    """Resolve the bearer token to the caller's subject id."""
    token = (token or "").strip()
    if not token:
        raise UnauthenticatedError("Missing authentication token.")

    if settings.dev_bypass_enabled and token == DEV_BYPASS_TOKEN:
        uid = settings.DEV_BYPASS_UID.strip() or "dev_uid"
        logger.debug("Development bypass token accepted for %s", uid)
        return TokenPayload(sub=uid)

    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
        token_data = TokenPayload(**payload)
    except (JWTError, ValueError):
        # Catches any error from jose or Pydantic validation
        raise UnauthenticatedError("Invalid authentication token.")

    if not token_data.sub.strip():
        raise UnauthenticatedError("Invalid authentication token.")
    return token_data


async def get_form(request: Request) -> AsyncGenerator[FormData, None]:
    """The raw multipart form, closed once the request is finished."""
    form = await request.form()
    try:
        yield form
    finally:
        await form.close()


async def get_json_body(request: Request) -> dict:
    """The request body as a JSON object."""
    try:
        body = await request.json()
    except ValueError:
        raise InvalidArgumentError("Invalid JSON body.")
    if not isinstance(body, dict):
        raise InvalidArgumentError("Invalid request body.")
    return body
