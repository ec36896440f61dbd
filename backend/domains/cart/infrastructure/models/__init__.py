"""
Cart Models - 购物车模型
"""

from domains.cart.infrastructure.models.cart_item import (
    AnonymousCartItem,
    CartItemMixin,
    UserCartItem,
)

__all__ = ["AnonymousCartItem", "CartItemMixin", "UserCartItem"]
