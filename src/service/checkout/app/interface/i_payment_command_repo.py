from abc import ABC, abstractmethod
from uuid import UUID

from src.service.checkout.domain.entity.payment_entity import Payment
from src.service.checkout.domain.enum.payment_status import PaymentStatus


class IPaymentCommandRepo(ABC):
    @abstractmethod
    async def create(self, *, payment: Payment) -> Payment:
        pass

    @abstractmethod
    async def get_by_order_id(self, *, order_id: UUID) -> Payment | None:
        pass

    @abstractmethod
    async def get_by_reference(self, *, external_reference: str) -> Payment | None:
        pass

    @abstractmethod
    async def transition_from_pending_by_reference(
        self, *, external_reference: str, to_status: PaymentStatus
    ) -> UUID | None:
        """
        Guarded pending -> `to_status` on the payment with this gateway reference

        Returns:
            The linked order id, or None when no pending payment matched (already
            finalized, failed, or unknown reference)
        """
        pass

    @abstractmethod
    async def transition_from_pending_by_order(
        self, *, order_id: UUID, to_status: PaymentStatus
    ) -> bool:
        """Guarded pending -> `to_status` on the payment of this order"""
        pass
