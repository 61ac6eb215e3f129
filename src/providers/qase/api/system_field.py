"""
SystemFieldAPI - 原子能力层
负责系统字段（severity/priority/... 的选项目录）相关的原子接口封装

对应 Qase API:
- System fields > Get all System Fields: GET /system_field
"""

import logging
from typing import List, Optional

from src.core.exceptions import QaseAPIError
from src.core.qase_client import QaseClient, get_qase_client
from src.schemas.system_field import SystemField, SystemFieldListResponse

logger = logging.getLogger(__name__)


class SystemFieldAPI:
    """
    Qase 系统字段 API 封装

    职责: 拉取完整的系统字段目录（字段定义 + 选项）
    """

    def __init__(self, client: Optional[QaseClient] = None):
        self.client = client or get_qase_client()

    async def get_system_fields(self) -> List[SystemField]:
        """
        获取所有系统字段

        API: GET /system_field

        Returns:
            字段定义列表；result 缺失或为 null 时返回空列表

        Raises:
            httpx.HTTPStatusError: 4xx 响应
            QaseAPIError: status 为 false
        """
        logger.debug("Getting system fields")

        resp = await self.client.get("/system_field")
        resp.raise_for_status()
        data = SystemFieldListResponse.model_validate(resp.json())

        if not data.is_success:
            err_msg = data.error_message or "Unknown error"
            logger.error("Failed to get system fields: %s", err_msg)
            raise QaseAPIError(f"Failed to get system fields: {err_msg}", err_msg)

        fields = data.result or []
        logger.info("Retrieved %d system fields", len(fields))
        return fields
