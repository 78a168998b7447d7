from typing import Any, Dict, Optional

import jwt

from src.platform.exception.exceptions import AuthenticationError
from src.service.checkout.domain.value_object.principal import Principal, UserRole


class JwtAuth:
    """Stateless token check; tokens are issued by the user service with the same secret."""

    def __init__(self, *, secret: str, algorithm: str) -> None:
        self.secret = secret
        self.algorithm = algorithm

    def decode_jwt_token(self, token: str) -> Dict[str, Any]:
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            raise AuthenticationError('Token expired')
        except jwt.PyJWTError:
            raise AuthenticationError('Invalid token')

    def authenticate(self, token: Optional[str]) -> Principal:
        if not token:
            raise AuthenticationError('Not authenticated')

        payload = self.decode_jwt_token(token)
        user_id = payload.get('user_id', payload.get('sub'))
        role = payload.get('role', UserRole.BUYER.value)
        if payload.get('is_active') is False:
            raise AuthenticationError('User is inactive')

        try:
            return Principal(id=int(user_id), role=UserRole(role))  # type: ignore[arg-type]
        except (TypeError, ValueError):
            raise AuthenticationError('Invalid token')
