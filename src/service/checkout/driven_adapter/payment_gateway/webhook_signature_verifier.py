"""
Signed gateway callbacks

Header format (Stripe style):
    Payment-Signature: t=<unix seconds>,v1=<hex hmac-sha256(secret, "<t>.<raw body>")>
"""

import hashlib
import hmac
import time
from typing import Any, Optional

import orjson

from src.platform.exception.exceptions import WebhookSignatureError


class WebhookSignatureVerifier:
    def __init__(self, *, secret: str, tolerance_seconds: int = 300) -> None:
        self._secret = secret.encode()
        self.tolerance_seconds = tolerance_seconds

    def sign(self, payload: bytes, *, timestamp: Optional[int] = None) -> str:
        timestamp = int(time.time()) if timestamp is None else timestamp
        return f't={timestamp},v1={self._digest(timestamp, payload)}'

    def verify(
        self, payload: bytes, header: Optional[str], *, now: Optional[float] = None
    ) -> dict[str, Any]:
        """
        Check the signature and return the decoded event

        Raises:
            WebhookSignatureError: missing / malformed header, stale timestamp,
                signature mismatch or a body that is not a JSON object
        """
        if not header:
            raise WebhookSignatureError('Missing payment signature header')

        timestamp, signatures = self._parse_header(header)
        now = time.time() if now is None else now
        if abs(now - timestamp) > self.tolerance_seconds:
            raise WebhookSignatureError('Payment signature timestamp outside tolerance')

        expected = self._digest(timestamp, payload)
        if not any(hmac.compare_digest(expected, signature) for signature in signatures):
            raise WebhookSignatureError('Payment signature mismatch')

        try:
            event = orjson.loads(payload)
        except orjson.JSONDecodeError as e:
            raise WebhookSignatureError('Webhook body is not valid JSON') from e
        if not isinstance(event, dict):
            raise WebhookSignatureError('Webhook body must be a JSON object')
        return event

    def _digest(self, timestamp: int, payload: bytes) -> str:
        signed_payload = f'{timestamp}.'.encode() + payload
        return hmac.new(self._secret, signed_payload, hashlib.sha256).hexdigest()

    @staticmethod
    def _parse_header(header: str) -> tuple[int, list[str]]:
        timestamp: int | None = None
        signatures: list[str] = []
        for part in header.split(','):
            key, _, value = part.strip().partition('=')
            if key == 't':
                try:
                    timestamp = int(value)
                except ValueError:
                    raise WebhookSignatureError('Malformed payment signature timestamp')
            elif key == 'v1' and value:
                signatures.append(value)

        if timestamp is None or not signatures:
            raise WebhookSignatureError('Malformed payment signature header')
        return timestamp, signatures
