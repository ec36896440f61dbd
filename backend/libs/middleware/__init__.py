"""
HTTP 中间件模块

提供请求处理中间件
"""

from libs.middleware.error_handler import ErrorHandlerMiddleware

__all__ = ["ErrorHandlerMiddleware"]
