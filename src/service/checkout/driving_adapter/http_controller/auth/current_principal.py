from typing import Optional

from dependency_injector.wiring import Provide, inject
from fastapi import Cookie, Depends, Header

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.service.checkout.domain.value_object.principal import Principal
from src.service.checkout.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


@inject
async def get_current_principal(
    jwt_auth: JwtAuth = Depends(Provide[Container.jwt_auth]),
    token: Optional[str] = Cookie(None, alias=settings.AUTH_COOKIE_NAME),
    authorization: Optional[str] = Header(None),
) -> Principal:
    """Cookie first (browser), then `Authorization: Bearer` (API clients); no DB query."""
    if not token and authorization and authorization.lower().startswith('bearer '):
        token = authorization[7:].strip()
    return jwt_auth.authenticate(token)
