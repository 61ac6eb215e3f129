import pytest

from src.core.config import settings
from src.providers.qase.field_hints import (
    DEFAULT_FIELD_HINTS,
    FieldKey,
    load_field_hints,
    to_field_key,
)


def test_default_hints_cover_every_field_key():
    assert set(DEFAULT_FIELD_HINTS) == set(FieldKey)
    for key, hints in DEFAULT_FIELD_HINTS.items():
        assert hints == ("case", key.value)


def test_to_field_key():
    assert to_field_key("priority") is FieldKey.PRIORITY
    assert to_field_key(FieldKey.LAYER) is FieldKey.LAYER

    with pytest.raises(ValueError) as exc_info:
        to_field_key("component")
    assert "severity, priority, behavior, type, status, automation, layer" in str(
        exc_info.value
    )


def test_load_field_hints_without_overrides():
    assert load_field_hints({}) == DEFAULT_FIELD_HINTS


def test_load_field_hints_with_overrides():
    hints = load_field_hints({"type": ["case", "kind"]})

    assert hints[FieldKey.TYPE] == ("case", "kind")
    assert hints[FieldKey.SEVERITY] == ("case", "severity")


def test_load_field_hints_from_settings(monkeypatch):
    monkeypatch.setattr(settings, "QASE_FIELD_HINTS", {"layer": ["tier"]})

    assert load_field_hints()[FieldKey.LAYER] == ("tier",)


@pytest.mark.parametrize(
    "overrides",
    [
        pytest.param({"component": ["case"]}, id="unknown_key"),
        pytest.param({"severity": []}, id="empty_tokens"),
    ],
)
def test_load_field_hints_rejects_invalid(overrides):
    with pytest.raises(ValueError):
        load_field_hints(overrides)
