"""
Libs - 共享组件库

提供跨领域使用的技术组件，非业务逻辑。

子模块：
- api: API 工具（依赖注入、Schema、错误消息）
- db: 数据库连接与 Repository 基类
- middleware: 中间件
- orm: ORM 基类
"""
