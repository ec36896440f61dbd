"""
Domains - 领域层

采用 DDD 4 层架构的领域模块：
- identity: 身份识别领域（匿名会话 Token、匿名数据合并）
- cart: 购物车领域（匿名用户与注册用户两套对称存储）
- preference: 偏好领域（位置偏好）
- catalog: 店铺/服务目录（外部协作方，只读）
"""
