"""
Qase API 层 - 原子能力封装

使用示例:
    from src.providers.qase.api import SystemFieldAPI

    fields = await SystemFieldAPI().get_system_fields()
"""

from .system_field import SystemFieldAPI

__all__ = [
    "SystemFieldAPI",
]
