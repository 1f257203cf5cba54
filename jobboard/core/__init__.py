"""
核心模块：配置、数据库、异常、统一响应、认证
"""
