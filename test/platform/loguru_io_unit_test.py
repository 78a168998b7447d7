import pytest

from src.platform.exception.exceptions import ConflictError
from src.platform.logging.loguru_io import Logger
from src.platform.logging.loguru_io_config import level_for_access_line
from src.platform.logging.loguru_io_utils import mask_sensitive, normalize_args_kwargs


@pytest.mark.unit
class TestMaskSensitive:
    def test_masks_secrets_inside_repr(self) -> None:
        masked = mask_sensitive("CheckoutResponse(client_secret='pi_1_secret_abc', total=9)")

        assert 'pi_1_secret_abc' not in masked
        assert "client_secret='********'" in masked
        assert 'total=9' in masked

    def test_leaves_clean_values_untouched(self) -> None:
        data = {'offer_id': 1, 'quantity': 2}

        assert mask_sensitive(data) is data


@pytest.mark.unit
class TestLoggerIo:
    def test_sync_function_passes_through(self) -> None:
        @Logger.io
        def add(*, a: int, b: int) -> int:
            return a + b

        assert add(a=1, b=2) == 3

    @pytest.mark.asyncio
    async def test_async_function_reraises_domain_error(self) -> None:
        @Logger.io
        async def reserve(*, offer_id: int) -> None:
            raise ConflictError(f'Offer {offer_id} sold out')

        with pytest.raises(ConflictError, match='sold out'):
            await reserve(offer_id=1)

    def test_normalize_drops_unknown_kwargs(self) -> None:
        def target(*, offer_id: int) -> None: ...

        _, kwargs = normalize_args_kwargs(target, offer_id=1, stray=True)

        assert kwargs == {'offer_id': 1}


@pytest.mark.unit
class TestAccessLineLevel:
    @pytest.mark.parametrize(
        ('line', 'level'),
        [
            ('127.0.0.1 - "POST /api/order HTTP/1.1" 201 - 12ms', 'SUCCESS'),
            ('127.0.0.1 - "POST /api/order HTTP/1.1" - 409 - 8ms', 'WARNING'),
            ('127.0.0.1 - "POST /api/webhooks/payment HTTP/1.1" 500', 'CRITICAL'),
        ],
    )
    def test_status_code_sets_level(self, line: str, level: str) -> None:
        assert level_for_access_line(line) == level

    def test_ordinary_message_is_not_an_access_line(self) -> None:
        assert level_for_access_line('reaper pass finished') is None
