"""
Cart Application Layer - 购物车应用层
"""

from domains.cart.application.cart_use_case import CartUseCase

__all__ = ["CartUseCase"]
