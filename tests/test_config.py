from __future__ import annotations

import pytest

from saas_starter.shared.config import get_settings


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("debug", "DEBUG"),
        (" Warning ", "WARNING"),
        ("ERROR", "ERROR"),
        ("verbose", "INFO"),
        ("", "INFO"),
    ],
)
def test_log_level_is_normalized_with_info_fallback(monkeypatch, raw, expected):
    monkeypatch.setenv("LOG_LEVEL", raw)

    assert get_settings().log_level == expected


def test_log_level_defaults_to_info(monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)

    assert get_settings().log_level == "INFO"

