"""
Catalog Domain - 店铺/服务目录（外部协作方）

购物车只通过 CatalogLookup 接口读取当前报价，用于生成快照。
"""

from domains.catalog.domain.interfaces import CatalogLookup, ServiceOffering, ShopNames

__all__ = ["CatalogLookup", "ServiceOffering", "ShopNames"]
