import asyncio
import logging
from typing import Any, Dict, Optional

from src.providers.qase.field_hints import FieldKey
from src.providers.qase.managers import SystemFieldResolver
from src.schemas.case import UpdateCaseRequest

logger = logging.getLogger(__name__)

# 请求字段 -> 逻辑字段
SYMBOLIC_FIELDS: Dict[str, FieldKey] = {
    "severity": FieldKey.SEVERITY,
    "priority": FieldKey.PRIORITY,
    "behavior": FieldKey.BEHAVIOR,
    "type": FieldKey.TYPE,
    "status": FieldKey.STATUS,
    "automation": FieldKey.AUTOMATION,
    "layer": FieldKey.LAYER,
}


class CaseService:
    """
    测试用例业务服务 (Application Layer)
    负责组装更新请求体：把符号值解析为数字 ID，其余字段原样透传。
    """

    def __init__(self, resolver: Optional[SystemFieldResolver] = None):
        self.resolver = resolver or SystemFieldResolver.get_instance()

    async def build_update_payload(self, request: UpdateCaseRequest) -> Dict[str, Any]:
        """
        组装用例更新请求体

        所有符号字段并发解析；任一字段解析失败则整体失败，不返回部分结果。

        Returns:
            可直接提交的 payload（不含 code / id，未设置的字段不出现）
        """
        data = request.model_dump(exclude={"code", "id"}, exclude_none=True)

        pending = {name: data[name] for name in SYMBOLIC_FIELDS if name in data}
        logger.debug(
            "Building update payload: code=%s, id=%d, symbolic_fields=%s",
            request.code,
            request.id,
            list(pending),
        )

        try:
            resolved = await asyncio.gather(
                *(
                    self.resolver.resolve(SYMBOLIC_FIELDS[name], value)
                    for name, value in pending.items()
                )
            )
        except Exception as e:
            logger.error(
                "Failed to resolve case fields: code=%s, id=%d, error=%s",
                request.code,
                request.id,
                e,
            )
            raise

        data.update(zip(pending, resolved))
        logger.info(
            "Update payload built: code=%s, id=%d, fields=%s",
            request.code,
            request.id,
            sorted(data),
        )
        return data
