"""
SharedFetchCache - 单次拉取的共享缓存

首次调用时启动一次拉取，所有并发调用方等待同一个拉取任务；
成功后结果常驻，失败时清空句柄以便下次重试，invalidate() 强制下次重新拉取。
"""

import asyncio
import logging
from typing import Awaitable, Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SharedFetchCache(Generic[T]):
    def __init__(self, loader: Callable[[], Awaitable[T]], name: str = "shared"):
        self._loader = loader
        self.name = name
        # 唯一的共享状态：None 表示无缓存，否则为进行中或已完成的拉取任务
        self._task: Optional["asyncio.Future[T]"] = None
        logger.debug("SharedFetchCache initialized: name=%s", name)

    @property
    def is_cached(self) -> bool:
        task = self._task
        return (
            task is not None
            and task.done()
            and not task.cancelled()
            and task.exception() is None
        )

    async def get(self) -> T:
        task = self._task
        if task is None:
            logger.debug("Cache miss: name=%s, starting fetch", self.name)
            task = asyncio.ensure_future(self._load())
            self._task = task
        elif task.done():
            logger.debug("Cache hit: name=%s", self.name)
        else:
            logger.debug("Joining in-flight fetch: name=%s", self.name)

        # shield: 单个调用方被取消时不影响其他等待者
        return await asyncio.shield(task)

    async def _load(self) -> T:
        logger.info("Fetching %s", self.name)
        try:
            value = await self._loader()
        except Exception as e:
            # 仅当句柄仍指向本次拉取时才清空，避免覆盖 invalidate 后的新拉取
            if self._task is asyncio.current_task():
                self._task = None
            logger.warning("Fetch failed: name=%s, error=%s", self.name, e)
            raise
        logger.info("Fetch complete: name=%s", self.name)
        return value

    def invalidate(self) -> None:
        had_value = self._task is not None
        self._task = None
        logger.info("Cache invalidated: name=%s, had_value=%s", self.name, had_value)
