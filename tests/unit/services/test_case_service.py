import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from src.core.exceptions import UnknownValueError
from src.providers.qase.field_hints import FieldKey
from src.schemas.case import UpdateCaseRequest
from src.services.case_service import CaseService


@pytest.fixture
def mock_resolver():
    resolver = MagicMock()
    labels = {
        (FieldKey.SEVERITY, "critical"): 2,
        (FieldKey.PRIORITY, "high"): 3,
        (FieldKey.STATUS, "actual"): 1,
    }

    async def resolve(key, value):
        if isinstance(value, (int, float)):
            return value
        if (key, value) not in labels:
            raise UnknownValueError(key.value, value, [])
        return labels[(key, value)]

    resolver.resolve = AsyncMock(side_effect=resolve)
    return resolver


@pytest.mark.asyncio
async def test_build_update_payload(mock_resolver):
    service = CaseService(resolver=mock_resolver)
    request = UpdateCaseRequest(
        code="DEMO",
        id=10,
        title="Login works",
        severity="critical",
        priority="high",
        layer=4,
        tags=["auth"],
        steps=[{"action": "Open page", "expected_result": "Page opens"}],
    )

    payload = await service.build_update_payload(request)

    assert payload == {
        "title": "Login works",
        "severity": 2,
        "priority": 3,
        "layer": 4,
        "tags": ["auth"],
        "steps": [{"action": "Open page", "expected_result": "Page opens"}],
    }
    assert mock_resolver.resolve.await_count == 3


@pytest.mark.asyncio
async def test_build_update_payload_without_symbolic_fields(mock_resolver):
    service = CaseService(resolver=mock_resolver)

    payload = await service.build_update_payload(
        UpdateCaseRequest(code="DEMO", id=1, description="d")
    )

    assert payload == {"description": "d"}
    mock_resolver.resolve.assert_not_awaited()


@pytest.mark.asyncio
async def test_build_update_payload_aborts_on_failure(mock_resolver):
    """测试任一字段解析失败则整体失败"""
    service = CaseService(resolver=mock_resolver)
    request = UpdateCaseRequest(code="DEMO", id=1, severity="critical", status="bogus")

    with pytest.raises(UnknownValueError):
        await service.build_update_payload(request)


@pytest.mark.asyncio
async def test_fields_resolved_concurrently():
    """测试不同字段并发解析，而不是逐个串行"""
    in_flight = 0
    peak = 0

    async def resolve(key, value):
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.01)
        in_flight -= 1
        return 1

    resolver = MagicMock()
    resolver.resolve = AsyncMock(side_effect=resolve)
    service = CaseService(resolver=resolver)

    await service.build_update_payload(
        UpdateCaseRequest(
            code="DEMO", id=1, severity="a", priority="b", type="c", behavior="d"
        )
    )

    assert peak == 4


def test_default_resolver_is_global_instance():
    with patch("src.services.case_service.SystemFieldResolver") as MockResolver:
        service = CaseService()
        assert service.resolver is MockResolver.get_instance.return_value
