"""
Cart Domain - 购物车领域
"""

from domains.cart.domain.types import CartLine, CartLineSnapshot, CartView

__all__ = ["CartLine", "CartLineSnapshot", "CartView"]
