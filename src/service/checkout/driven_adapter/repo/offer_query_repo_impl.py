from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.checkout.app.interface.i_offer_query_repo import IOfferQueryRepo
from src.service.checkout.domain.entity.offer_entity import Offer
from src.service.checkout.driven_adapter.model.entity_mapper import offer_to_entity
from src.service.checkout.driven_adapter.model.offer_model import OfferModel


class OfferQueryRepoImpl(IOfferQueryRepo):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def get_by_id(self, *, offer_id: int) -> Offer | None:
        result = await self.session.execute(
            select(OfferModel)
            .where(OfferModel.id == offer_id)
            .execution_options(populate_existing=True)
        )
        db_offer = result.scalar_one_or_none()
        return offer_to_entity(db_offer) if db_offer else None
