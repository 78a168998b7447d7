"""
Unit of Work - one AsyncSession shared by every checkout repository

Two flavours:
- ad_hoc: commit when the block exits cleanly, rollback on exception
- scoped: caller must `await uow.commit()`; anything uncommitted is rolled back

Usage:
    async with SqlAlchemyUnitOfWork.scoped(session_factory) as uow:
        await uow.inventory_ledger.reserve_general_admission(offer_id=1, quantity=2)
        await uow.order_command_repo.create(order=order)
        await uow.commit()
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, Any, Callable

from sqlalchemy.ext.asyncio import AsyncSession


if TYPE_CHECKING:
    from src.service.checkout.app.interface.i_inventory_ledger import IInventoryLedger
    from src.service.checkout.app.interface.i_offer_query_repo import IOfferQueryRepo
    from src.service.checkout.app.interface.i_order_command_repo import IOrderCommandRepo
    from src.service.checkout.app.interface.i_payment_command_repo import IPaymentCommandRepo
    from src.service.checkout.app.interface.i_ticket_command_repo import ITicketCommandRepo


class AbstractUnitOfWork(abc.ABC):
    inventory_ledger: IInventoryLedger
    order_command_repo: IOrderCommandRepo
    payment_command_repo: IPaymentCommandRepo
    ticket_command_repo: ITicketCommandRepo
    offer_query_repo: IOfferQueryRepo

    auto_commit: bool = False

    async def __aenter__(self) -> AbstractUnitOfWork:
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        if exc_type is None and self.auto_commit:
            await self.commit()
        else:
            await self.rollback()

    async def commit(self) -> None:
        await self._commit()

    @abc.abstractmethod
    async def _commit(self) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    async def rollback(self) -> None:
        raise NotImplementedError


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    def __init__(
        self, session_factory: Callable[[], AsyncSession], *, auto_commit: bool = False
    ) -> None:
        self.session_factory = session_factory
        self.auto_commit = auto_commit
        self.session: AsyncSession | None = None

    @classmethod
    def ad_hoc(cls, session_factory: Callable[[], AsyncSession]) -> SqlAlchemyUnitOfWork:
        return cls(session_factory, auto_commit=True)

    @classmethod
    def scoped(cls, session_factory: Callable[[], AsyncSession]) -> SqlAlchemyUnitOfWork:
        return cls(session_factory, auto_commit=False)

    async def __aenter__(self) -> SqlAlchemyUnitOfWork:
        from src.service.checkout.driven_adapter.repo.inventory_ledger_impl import (
            InventoryLedgerImpl,
        )
        from src.service.checkout.driven_adapter.repo.offer_query_repo_impl import (
            OfferQueryRepoImpl,
        )
        from src.service.checkout.driven_adapter.repo.order_command_repo_impl import (
            OrderCommandRepoImpl,
        )
        from src.service.checkout.driven_adapter.repo.payment_command_repo_impl import (
            PaymentCommandRepoImpl,
        )
        from src.service.checkout.driven_adapter.repo.ticket_command_repo_impl import (
            TicketCommandRepoImpl,
        )

        self.session = self.session_factory()
        self.inventory_ledger = InventoryLedgerImpl(self.session)
        self.order_command_repo = OrderCommandRepoImpl(self.session)
        self.payment_command_repo = PaymentCommandRepoImpl(self.session)
        self.ticket_command_repo = TicketCommandRepoImpl(self.session)
        self.offer_query_repo = OfferQueryRepoImpl(self.session)
        await super().__aenter__()
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        try:
            await super().__aexit__(exc_type, exc, tb)
        finally:
            if self.session is not None:
                await self.session.close()
                self.session = None

    async def _commit(self) -> None:
        assert self.session is not None, 'unit of work used outside `async with`'
        await self.session.commit()

    async def rollback(self) -> None:
        if self.session is not None:
            await self.session.rollback()


UnitOfWorkFactory = Callable[[], AbstractUnitOfWork]
