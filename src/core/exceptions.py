"""
Qase 相关异常定义

解析错误分类:
- EmptyValueError: 输入为空白字符串，调用方错误，不可重试
- FieldUnavailableError: 元数据拉取失败或目录中没有对应字段
- UnknownValueError: 字段存在但没有匹配的选项，消息中列出所有可用值
- AmbiguousValueError: 多个选项归一化后相同且 ID 不同
"""

from typing import Any, List, Optional


class QaseError(Exception):
    """Qase 相关错误的基类"""


class QaseAPIError(QaseError):
    """接口返回 status=false"""

    def __init__(self, message: str, error_message: Optional[str] = None):
        self.error_message = error_message
        super().__init__(message)


class ResolutionError(QaseError):
    """符号值解析失败"""

    def __init__(self, message: str, key: str, value: Any = None):
        self.key = key
        self.value = value
        super().__init__(message)


class EmptyValueError(ResolutionError):
    def __init__(self, key: str, value: Any = None):
        super().__init__(f"Empty {key} value", key, value)


class FieldUnavailableError(ResolutionError):
    """
    元数据不可用

    retryable 为 True 表示原因是拉取失败；失败结果不会被缓存，
    下一次 resolve 会自动重新拉取。
    """

    def __init__(self, key: str, value: Any = None, retryable: bool = False):
        self.retryable = retryable
        super().__init__(
            f"Unable to resolve {key}; system field metadata is unavailable.",
            key,
            value,
        )


class UnknownValueError(ResolutionError):
    def __init__(self, key: str, value: Any, available: List[str]):
        self.available = available
        described = ", ".join(available) or "unknown"
        super().__init__(
            f'Unknown {key} value "{value}". Available values: {described}.',
            key,
            value,
        )


class AmbiguousValueError(ResolutionError):
    def __init__(self, key: str, value: Any, candidates: List[str]):
        self.candidates = candidates
        super().__init__(
            f'Ambiguous {key} value "{value}". Matches: {", ".join(candidates)}.',
            key,
            value,
        )
