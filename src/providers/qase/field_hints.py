"""
系统字段提示词表

每个逻辑字段 (FieldKey) 对应一组提示词；目录中字段的 slug 或 title 归一化后
包含全部提示词即视为匹配。不同部署的 slug/title 略有差异，因此这里只做包含匹配。

可通过环境变量 QASE_FIELD_HINTS 覆盖，例如:
    QASE_FIELD_HINTS='{"severity": ["case", "severity"]}'
"""

import logging
from enum import Enum
from typing import Dict, Mapping, Optional, Sequence, Tuple

from src.core.config import settings

logger = logging.getLogger(__name__)


class FieldKey(str, Enum):
    SEVERITY = "severity"
    PRIORITY = "priority"
    BEHAVIOR = "behavior"
    TYPE = "type"
    STATUS = "status"
    AUTOMATION = "automation"
    LAYER = "layer"


DEFAULT_FIELD_HINTS: Dict[FieldKey, Tuple[str, ...]] = {
    FieldKey.SEVERITY: ("case", "severity"),
    FieldKey.PRIORITY: ("case", "priority"),
    FieldKey.BEHAVIOR: ("case", "behavior"),
    FieldKey.TYPE: ("case", "type"),
    FieldKey.STATUS: ("case", "status"),
    FieldKey.AUTOMATION: ("case", "automation"),
    FieldKey.LAYER: ("case", "layer"),
}


def to_field_key(key) -> FieldKey:
    """将字符串转换为 FieldKey，非法值抛出 ValueError"""
    if isinstance(key, FieldKey):
        return key
    try:
        return FieldKey(key)
    except ValueError:
        valid = ", ".join(k.value for k in FieldKey)
        raise ValueError(f"Unknown field key '{key}'. Valid keys: {valid}") from None


def load_field_hints(
    overrides: Optional[Mapping[str, Sequence[str]]] = None,
) -> Dict[FieldKey, Tuple[str, ...]]:
    """
    合并默认提示词与覆盖配置

    Args:
        overrides: {field_key: [hint, ...]}，默认读取 settings.QASE_FIELD_HINTS

    Returns:
        完整的 {FieldKey: hints} 映射
    """
    if overrides is None:
        overrides = settings.QASE_FIELD_HINTS or {}

    hints = dict(DEFAULT_FIELD_HINTS)
    for key, tokens in overrides.items():
        field_key = to_field_key(key)
        if not tokens:
            raise ValueError(f"Field hints for '{key}' must not be empty")
        hints[field_key] = tuple(tokens)
        logger.info("Field hints overridden: %s -> %s", field_key.value, hints[field_key])
    return hints
