"""
Database Module

提供数据库相关的基础设施：
- database: 数据库连接和会话管理
- base_repository: 按所有者隔离数据的 Repository 基类
"""

from libs.db.base_repository import OwnedRepositoryBase
from libs.db.database import (
    Base,
    close_db,
    get_session,
    get_session_context,
    init_db,
)

__all__ = [
    "Base",
    "OwnedRepositoryBase",
    "close_db",
    "get_session",
    "get_session_context",
    "init_db",
]
