"""
Cart Repositories - 购物车仓储实现
"""

from domains.cart.infrastructure.repositories.sqlalchemy_cart_repository import (
    AnonymousCartRepository,
    SQLAlchemyCartRepository,
    UserCartRepository,
)

__all__ = ["AnonymousCartRepository", "SQLAlchemyCartRepository", "UserCartRepository"]
