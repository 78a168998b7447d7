from typing import Optional

import attrs


@attrs.frozen
class CartItem:
    """One line of a checkout request. A seat line always buys exactly one ticket."""

    offer_id: int
    quantity: int = 1
    seat_id: Optional[int] = None

    @property
    def is_seat(self) -> bool:
        return self.seat_id is not None
