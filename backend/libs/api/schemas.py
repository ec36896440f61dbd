"""
Shared API Schemas - 共享请求/响应基类
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """camelCase 序列化基类

    JSON 字段使用 camelCase（与前端约定一致），Python 侧仍为 snake_case，
    两种写法都可以用于构造。
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
