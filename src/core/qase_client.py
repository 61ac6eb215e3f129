import logging
import threading
from typing import Optional

import httpx
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from src.core.config import settings

logger = logging.getLogger(__name__)

_qase_client = None
_qase_client_lock = threading.Lock()  # 线程安全锁

# 定义可重试的异常类型
RETRYABLE_EXCEPTIONS = (
    httpx.ConnectError,
    httpx.TimeoutException,
    httpx.ReadTimeout,
    httpx.WriteTimeout,
    httpx.ConnectTimeout,
)


def _mask_token(token: str, visible_chars: int = 4) -> str:
    """对 token 进行脱敏处理，仅显示前几个字符"""
    if not token or len(token) <= visible_chars:
        return "***"
    return f"{token[:visible_chars]}***"


class RetryableHTTPError(Exception):
    """可重试的 HTTP 错误"""

    def __init__(self, response: httpx.Response):
        self.response = response
        super().__init__(f"HTTP {response.status_code}: {response.text[:200]}")


class QaseAuth(httpx.Auth):
    """
    Qase API 认证

    每次请求时注入 Token 头。未配置 token 时直接报错（不重试），
    这样在仅传数字 ID 的场景下，不配置 token 也能正常构造客户端。
    """

    def __init__(self, token: Optional[str] = None):
        self._token = token

    async def async_auth_flow(self, request: httpx.Request):
        token = self._token or settings.QASE_API_TOKEN
        if not token:
            raise ValueError(
                "QASE_API_TOKEN environment variable is required. "
                "Please set it before calling the Qase API."
            )

        request.headers["Token"] = token
        yield request


class QaseClient:
    """
    Qase API 异步客户端

    特性:
    - 自动注入认证头 (Token)
    - 自动重试机制 (网络错误、超时、5xx 错误)
    - 指数退避策略
    """

    # 重试配置
    MAX_RETRIES = 3
    RETRY_MIN_WAIT = 1  # 最小等待时间（秒）
    RETRY_MAX_WAIT = 10  # 最大等待时间（秒）

    def __init__(self, base_url: Optional[str] = None, token: Optional[str] = None):
        self.base_url = base_url or settings.api_base_url
        logger.info(
            "Initializing QaseClient with base_url=%s, token=%s",
            self.base_url,
            _mask_token(token or settings.QASE_API_TOKEN or ""),
        )
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            auth=QaseAuth(token),
            timeout=httpx.Timeout(settings.QASE_HTTP_TIMEOUT),
            trust_env=False,
        )
        logger.debug("QaseClient initialized successfully")

    def _retrying(self) -> AsyncRetrying:
        """网络错误、超时和 5xx 按指数退避重试，耗尽后抛出最后一次的异常"""
        return AsyncRetrying(
            stop=stop_after_attempt(self.MAX_RETRIES),
            wait=wait_exponential(
                multiplier=1, min=self.RETRY_MIN_WAIT, max=self.RETRY_MAX_WAIT
            ),
            retry=retry_if_exception_type(RETRYABLE_EXCEPTIONS + (RetryableHTTPError,)),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )

    async def get(self, path: str, params: Optional[dict] = None) -> httpx.Response:
        """
        GET 请求（带自动重试）

        4xx 响应不重试，原样返回给调用方处理。

        Raises:
            RetryableHTTPError: 5xx 错误，重试耗尽后抛出
            ValueError: 未配置 token
        """
        async for attempt in self._retrying():
            with attempt:
                response = await self.client.get(path, params=params)
                logger.debug(
                    "GET %s -> %d (attempt %d)",
                    path,
                    response.status_code,
                    attempt.retry_state.attempt_number,
                )
                if response.status_code >= 500:
                    raise RetryableHTTPError(response)

        if response.status_code >= 400:
            logger.error(
                "HTTP error %d from %s: %s",
                response.status_code,
                path,
                response.text[:200],
            )
        return response

    async def close(self):
        """关闭客户端连接"""
        logger.info("Closing QaseClient connection")
        await self.client.aclose()
        logger.debug("QaseClient connection closed")


def get_qase_client() -> QaseClient:
    """获取进程内共享的客户端，首次调用时创建"""
    global _qase_client

    with _qase_client_lock:
        if _qase_client is None:
            logger.debug("Creating QaseClient singleton instance")
            _qase_client = QaseClient()
        return _qase_client


def reset_qase_client() -> None:
    """重置单例客户端（主要用于测试）"""
    global _qase_client

    with _qase_client_lock:
        _qase_client = None
