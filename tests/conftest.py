import logging
import pytest
import sys

from src.core.qase_client import reset_qase_client
from src.providers.qase.managers import SystemFieldResolver


# Configure logging for tests
logging.basicConfig(
    level=logging.DEBUG,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)
logger.info("Test logging configured: level=DEBUG")


@pytest.fixture(autouse=True)
def reset_singletons():
    """每个测试前后重置全局单例，避免缓存跨测试（跨事件循环）泄漏"""
    SystemFieldResolver.reset_instance()
    reset_qase_client()
    yield
    SystemFieldResolver.reset_instance()
    reset_qase_client()


@pytest.fixture(autouse=True)
def log_test_start(request):
    """Log test start and end for each test."""
    logger.info("=" * 80)
    logger.info("Starting test: %s", request.node.name)
    yield
    logger.info("Completed test: %s", request.node.name)
    logger.info("=" * 80)
