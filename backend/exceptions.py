"""
Exceptions - 自定义异常类

提供统一的异常层次结构，便于错误处理和 API 响应。
"""

from typing import Any


class ShopCartError(Exception):
    """基础异常

    所有自定义异常的基类。

    Attributes:
        message: 错误消息
        code: 错误代码（可选）
        details: 额外详情（可选）
        status_code: 对应的 HTTP 状态码
    """

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message


class ConfigurationError(ShopCartError):
    """配置错误

    签名密钥、Issuer、Audience 等必需配置缺失或非法时抛出。
    属于部署问题，不可按请求恢复，对客户端只返回通用消息。
    """

    status_code = 500

    def __init__(
        self,
        message: str = "Server configuration error",
        code: str = "CONFIGURATION_ERROR",
        missing: list[str] | None = None,
    ) -> None:
        details = {"missing": missing} if missing else {}
        super().__init__(message, code, details)
        self.missing = missing or []


class NotFoundError(ShopCartError):
    """资源不存在

    当请求的资源（购物车条目、店铺、服务）不存在或当前不可用时抛出。
    """

    status_code = 404

    def __init__(
        self,
        resource: str,
        resource_id: str | None = None,
        code: str = "NOT_FOUND",
        message: str | None = None,
    ) -> None:
        if message is None:
            message = f"{resource} not found"
            if resource_id:
                message = f"{resource} not found: {resource_id}"
        super().__init__(message, code, {"resource": resource, "id": resource_id})
        self.resource = resource
        self.resource_id = resource_id

