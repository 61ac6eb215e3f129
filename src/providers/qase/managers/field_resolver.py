"""
SystemFieldResolver - 系统字段符号值解析器

将人类可读的标签（如 "critical"、"Not Applicable"）解析为 Qase 更新接口所需的数字 ID。

解析流程:
1. 数字直接返回（不访问网络）
2. 字符串去除首尾空白；空串报错；数字字符串按数字 ID 处理
3. 通过提示词在系统字段目录中定位字段定义（包含匹配，宽松）
4. 在字段选项中按归一化后的 slug / title / id 精确匹配（严格）

使用示例:
    resolver = SystemFieldResolver.get_instance()
    severity_id = await resolver.resolve("severity", "Critical")

    # 或使用模块级快捷函数
    severity_id = await resolve_system_field_option_id("severity", "critical")
"""

import logging
import re
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union

from src.core.cache import SharedFetchCache
from src.core.exceptions import (
    AmbiguousValueError,
    EmptyValueError,
    FieldUnavailableError,
    UnknownValueError,
)
from src.providers.qase.api import SystemFieldAPI
from src.providers.qase.field_hints import FieldKey, load_field_hints, to_field_key
from src.schemas.system_field import SystemField, SystemFieldOption

logger = logging.getLogger(__name__)

Number = Union[int, float]

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")
_INTEGER_RE = re.compile(r"^[+-]?\d+$")
_DECIMAL_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


def normalize(value: str) -> str:
    """转小写并移除所有非字母数字字符: "Not-Applicable" -> "notapplicable" """
    return _NON_ALNUM_RE.sub("", value.lower())


def parse_number(text: str) -> Optional[Number]:
    """
    将十进制数字字符串解析为数字，非数字返回 None

    整数值返回 int（"3"、"3.0" -> 3），其余返回 float。
    与 JavaScript Number() 不同，"0x10"、"0b11"、"0o7"、"Infinity" 不算数字，按标签匹配。
    """
    if _INTEGER_RE.match(text):
        return int(text)
    if not _DECIMAL_RE.match(text):
        return None
    number = float(text)
    return int(number) if number.is_integer() else number


def _matches_hints(text: Optional[str], hints: Sequence[str]) -> bool:
    if not text:
        return False
    normalized = normalize(text)
    return all(hint in normalized for hint in hints)


def describe_options(options: Sequence[SystemFieldOption]) -> List[str]:
    """可用选项的展示名称列表（title > slug > id）"""
    return [option.label for option in options if option.label]


class SystemFieldResolver:
    """
    系统字段解析器 (Manager Layer)

    - 目录缓存: 进程内只拉取一次，并发请求共享同一次拉取，失败不缓存
    - 字段定位: 提示词包含匹配
    - 选项匹配: 归一化精确匹配，多个不同 ID 同时命中时报歧义
    """

    _instance: Optional["SystemFieldResolver"] = None

    def __init__(
        self,
        system_field_api: Optional[SystemFieldAPI] = None,
        field_hints: Optional[Mapping[FieldKey, Sequence[str]]] = None,
    ):
        """
        Args:
            system_field_api: SystemFieldAPI 实例（可选，首次拉取时才自动创建）
            field_hints: 提示词表（可选，默认读取 field_hints 配置）
        """
        self._system_field_api = system_field_api
        hints = field_hints if field_hints is not None else load_field_hints()
        self.field_hints: Dict[FieldKey, Tuple[str, ...]] = {
            to_field_key(key): tuple(normalize(token) for token in tokens)
            for key, tokens in hints.items()
        }
        self._catalog: SharedFetchCache[List[SystemField]] = SharedFetchCache(
            self._fetch_catalog, name="system_fields"
        )

    @classmethod
    def get_instance(cls) -> "SystemFieldResolver":
        """获取全局单例实例"""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """重置单例实例（主要用于测试）"""
        cls._instance = None

    @property
    def system_field_api(self) -> SystemFieldAPI:
        # 延迟创建：纯数字解析不需要客户端
        if self._system_field_api is None:
            self._system_field_api = SystemFieldAPI()
        return self._system_field_api

    async def _fetch_catalog(self) -> List[SystemField]:
        return await self.system_field_api.get_system_fields()

    def invalidate_cache(self) -> None:
        """清空目录缓存，下一次解析重新拉取"""
        self._catalog.invalidate()

    @property
    def is_cached(self) -> bool:
        return self._catalog.is_cached

    async def get_catalog(self) -> List[SystemField]:
        return await self._catalog.get()

    # ========== 字段定位 ==========

    async def _find_field(self, key: FieldKey, value=None) -> SystemField:
        try:
            fields = await self._catalog.get()
        except Exception as e:
            logger.warning("System field metadata unavailable for %s: %s", key.value, e)
            raise FieldUnavailableError(key.value, value, retryable=True) from e

        hints = self.field_hints.get(key)
        if not hints:
            raise FieldUnavailableError(key.value, value)

        matches = [
            field
            for field in fields
            if _matches_hints(field.slug, hints) or _matches_hints(field.title, hints)
        ]
        if not matches:
            logger.warning(
                "No system field matches hints %s for %s (catalog size=%d)",
                hints,
                key.value,
                len(fields),
            )
            raise FieldUnavailableError(key.value, value)

        if len(matches) > 1:
            logger.warning(
                "Multiple system fields match %s: %s, using the first one",
                key.value,
                [field.slug or field.title for field in matches],
            )
        return matches[0]

    # ========== 选项匹配 ==========

    def _match_option(
        self, key: FieldKey, field: SystemField, trimmed: str, raw_value: str
    ) -> int:
        target = normalize(trimmed)
        matches: List[SystemFieldOption] = []
        if target:
            for option in field.options:
                # 没有 ID 的选项无法提交给更新接口
                if not option.id:
                    continue
                candidates = (option.slug, option.title, str(option.id))
                if any(c and normalize(c) == target for c in candidates):
                    matches.append(option)

        if not matches:
            raise UnknownValueError(key.value, raw_value, describe_options(field.options))

        matched_ids = {option.id for option in matches}
        if len(matched_ids) > 1:
            raise AmbiguousValueError(
                key.value,
                raw_value,
                [f"{option.label} (id={option.id})" for option in matches],
            )

        option = matches[0]
        logger.debug(
            "Resolved %s '%s' -> %s (%s)", key.value, raw_value, option.id, option.label
        )
        return option.id

    # ========== 对外接口 ==========

    async def resolve(self, key: Union[FieldKey, str], value: Union[Number, str]) -> Number:
        """
        将符号值解析为数字 ID

        Args:
            key: 逻辑字段 (severity/priority/behavior/type/status/automation/layer)
            value: 数字 ID、数字字符串或标签

        Returns:
            数字 ID

        Raises:
            EmptyValueError: 空白字符串
            FieldUnavailableError: 元数据拉取失败或目录中无此字段
            UnknownValueError: 无匹配选项，消息列出全部可用值
            AmbiguousValueError: 多个不同 ID 的选项同时匹配
        """
        field_key = to_field_key(key)

        if isinstance(value, bool):
            raise TypeError(f"Invalid {field_key.value} value: {value!r}")
        if isinstance(value, (int, float)):
            return value
        if not isinstance(value, str):
            raise TypeError(f"Invalid {field_key.value} value: {value!r}")

        trimmed = value.strip()
        if not trimmed:
            raise EmptyValueError(field_key.value, value)

        number = parse_number(trimmed)
        if number is not None:
            return number

        field = await self._find_field(field_key, value)
        return self._match_option(field_key, field, trimmed, value)

    async def list_options(self, key: Union[FieldKey, str]) -> Dict[str, int]:
        """
        获取字段的 {展示名称: ID} 映射

        多个选项展示名称相同但 ID 不同时，键写作 "名称 (ID)"，不会互相覆盖。

        Raises:
            FieldUnavailableError: 元数据拉取失败或目录中无此字段
        """
        field_key = to_field_key(key)
        field = await self._find_field(field_key)
        options = [option for option in field.options if option.id]

        ids_by_label: Dict[str, set] = {}
        for option in options:
            ids_by_label.setdefault(option.label, set()).add(option.id)

        result: Dict[str, int] = {}
        for option in options:
            label = option.label
            if len(ids_by_label[label]) > 1:
                label = f"{label} ({option.id})"
            result[label] = option.id
        return result


async def resolve_system_field_option_id(
    key: Union[FieldKey, str], value: Union[Number, str]
) -> Number:
    """使用全局解析器解析符号值"""
    return await SystemFieldResolver.get_instance().resolve(key, value)


def reset_system_field_cache() -> None:
    """清空全局解析器的目录缓存"""
    if SystemFieldResolver._instance is not None:
        SystemFieldResolver._instance.invalidate_cache()
