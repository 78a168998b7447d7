from src.service.checkout.domain.value_object.cart_item import CartItem
from src.service.checkout.domain.value_object.principal import Principal, UserRole

__all__ = ['CartItem', 'Principal', 'UserRole']
