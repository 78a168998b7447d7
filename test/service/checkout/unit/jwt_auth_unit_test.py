from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
import pytest

from src.platform.exception.exceptions import AuthenticationError
from src.service.checkout.domain.value_object.principal import UserRole
from src.service.checkout.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


SECRET = 'unit_test_secret'


def _token(payload: dict[str, Any], *, secret: str = SECRET) -> str:
    return jwt.encode(payload, secret, algorithm='HS256')


@pytest.fixture
def jwt_auth() -> JwtAuth:
    return JwtAuth(secret=SECRET, algorithm='HS256')


@pytest.mark.unit
class TestJwtAuth:
    def test_user_id_claim(self, jwt_auth: JwtAuth) -> None:
        principal = jwt_auth.authenticate(_token({'user_id': 42, 'role': 'buyer'}))

        assert principal.id == 42
        assert principal.role == UserRole.BUYER

    def test_sub_claim_and_default_role(self, jwt_auth: JwtAuth) -> None:
        principal = jwt_auth.authenticate(_token({'sub': '9'}))

        assert principal.id == 9
        assert principal.role == UserRole.BUYER

    def test_admin_role(self, jwt_auth: JwtAuth) -> None:
        principal = jwt_auth.authenticate(_token({'user_id': 1, 'role': 'admin'}))

        assert principal.is_admin
        assert principal.can_access(owner_id=999)

    @pytest.mark.parametrize(
        'token',
        [
            pytest.param(None, id='missing'),
            pytest.param('not-a-jwt', id='garbage'),
            pytest.param(_token({'user_id': 1}, secret='other'), id='wrong_secret'),
            pytest.param(_token({'role': 'buyer'}), id='no_user_id'),
            pytest.param(_token({'user_id': 1, 'role': 'superuser'}), id='unknown_role'),
            pytest.param(_token({'user_id': 1, 'is_active': False}), id='inactive'),
        ],
    )
    def test_rejected_tokens(self, jwt_auth: JwtAuth, token: str | None) -> None:
        with pytest.raises(AuthenticationError):
            jwt_auth.authenticate(token)

    def test_expired_token(self, jwt_auth: JwtAuth) -> None:
        expired = _token(
            {'user_id': 1, 'exp': datetime.now(timezone.utc) - timedelta(minutes=1)}
        )

        with pytest.raises(AuthenticationError, match='expired'):
            jwt_auth.authenticate(expired)
