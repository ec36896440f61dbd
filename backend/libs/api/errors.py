"""
API Error Messages - API 错误消息常量
"""

ANONYMOUS_TOKEN_REQUIRED = "Anonymous session token required"
INVALID_ANONYMOUS_TOKEN = "Invalid or expired anonymous session token"
UNAUTHORIZED = "Not authenticated"
INVALID_TOKEN = "Invalid or expired access token"
INTERNAL_ERROR = "Internal server error"
CONFIGURATION_ERROR = "Server configuration error."
