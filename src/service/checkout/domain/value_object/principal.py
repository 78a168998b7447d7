from enum import StrEnum

import attrs


class UserRole(StrEnum):
    BUYER = 'buyer'
    SELLER = 'seller'
    ADMIN = 'admin'


@attrs.frozen
class Principal:
    """Authenticated caller, rebuilt from the JWT on every request."""

    id: int
    role: UserRole = UserRole.BUYER

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def can_access(self, *, owner_id: int) -> bool:
        return self.is_admin or self.id == owner_id
