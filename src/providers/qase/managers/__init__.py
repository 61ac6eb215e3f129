"""
Qase Manager 层 - 业务编排与缓存管理

核心组件:
- SystemFieldResolver: 系统字段符号值解析，Label -> Option ID
"""

from .field_resolver import (
    SystemFieldResolver,
    reset_system_field_cache,
    resolve_system_field_option_id,
)

__all__ = [
    "SystemFieldResolver",
    "reset_system_field_cache",
    "resolve_system_field_option_id",
]
