from abc import ABC, abstractmethod

from src.service.checkout.app.dto.payment_intent import PaymentIntent


class IPaymentGateway(ABC):
    @abstractmethod
    async def create_payment_intent(self, *, amount: int, currency: str) -> PaymentIntent:
        """
        Ask the gateway for a payment intent

        Args:
            amount: Total in minor units (cents)
            currency: ISO currency code, lower case

        Raises:
            PaymentGatewayError: gateway unreachable or rejected the request
        """
        pass

    async def aclose(self) -> None:
        """Release any connection pool held by the gateway client."""
        return None
