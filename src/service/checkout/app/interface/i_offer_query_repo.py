from abc import ABC, abstractmethod

from src.service.checkout.domain.entity.offer_entity import Offer


class IOfferQueryRepo(ABC):
    @abstractmethod
    async def get_by_id(self, *, offer_id: int) -> Offer | None:
        pass
