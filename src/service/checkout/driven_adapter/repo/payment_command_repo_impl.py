from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.checkout.app.interface.i_payment_command_repo import IPaymentCommandRepo
from src.service.checkout.domain.entity.payment_entity import Payment
from src.service.checkout.domain.enum.payment_status import PaymentStatus
from src.service.checkout.driven_adapter.model.entity_mapper import payment_to_entity
from src.service.checkout.driven_adapter.model.payment_model import PaymentModel


class PaymentCommandRepoImpl(IPaymentCommandRepo):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def create(self, *, payment: Payment) -> Payment:
        self.session.add(
            PaymentModel(
                id=payment.id,
                order_id=payment.order_id,
                status=payment.status.value,
                amount_charged=payment.amount_charged,
                currency=payment.currency,
                external_reference=payment.external_reference,
                created_at=payment.created_at,
                updated_at=payment.updated_at,
            )
        )
        await self.session.flush()
        return payment

    @Logger.io
    async def get_by_order_id(self, *, order_id: UUID) -> Payment | None:
        result = await self.session.execute(
            select(PaymentModel)
            .where(PaymentModel.order_id == order_id)
            .execution_options(populate_existing=True)
        )
        db_payment = result.scalar_one_or_none()
        return payment_to_entity(db_payment) if db_payment else None

    @Logger.io
    async def get_by_reference(self, *, external_reference: str) -> Payment | None:
        result = await self.session.execute(
            select(PaymentModel)
            .where(PaymentModel.external_reference == external_reference)
            .execution_options(populate_existing=True)
        )
        db_payment = result.scalar_one_or_none()
        return payment_to_entity(db_payment) if db_payment else None

    @Logger.io
    async def transition_from_pending_by_reference(
        self, *, external_reference: str, to_status: PaymentStatus
    ) -> UUID | None:
        result = await self.session.execute(
            update(PaymentModel)
            .where(
                PaymentModel.external_reference == external_reference,
                PaymentModel.status == PaymentStatus.PENDING.value,
            )
            .values(status=to_status.value)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:  # type: ignore[attr-defined]
            return None

        order_id = await self.session.scalar(
            select(PaymentModel.order_id).where(
                PaymentModel.external_reference == external_reference
            )
        )
        return order_id

    @Logger.io
    async def transition_from_pending_by_order(
        self, *, order_id: UUID, to_status: PaymentStatus
    ) -> bool:
        result = await self.session.execute(
            update(PaymentModel)
            .where(
                PaymentModel.order_id == order_id,
                PaymentModel.status == PaymentStatus.PENDING.value,
            )
            .values(status=to_status.value)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1  # type: ignore[attr-defined]
