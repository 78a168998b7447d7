from decimal import Decimal

import attrs


@attrs.define
class Offer:
    """Sellable inventory of one ticket tier; quantity_sold counts reserved and sold units."""

    id: int
    event_id: int
    ticket_tier_id: int
    name: str
    price: Decimal
    quantity_for_sale: int
    quantity_sold: int = 0

    @property
    def quantity_available(self) -> int:
        return self.quantity_for_sale - self.quantity_sold
