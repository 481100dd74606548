"""Unit tests for src/core/config.py"""

import pytest

from src.core.config import DEFAULT_RULES, SAFE_PATH_ENV_VAR, RulesConfig


def test_defaults() -> None:
    """Castling only needs empty squares unless switched on"""
    assert DEFAULT_RULES.castling_requires_safe_path is False
    assert RulesConfig() == DEFAULT_RULES


@pytest.mark.parametrize("raw", ["1", "true", "True", " yes ", "ON"])
def test_switch_on_from_env(monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
    monkeypatch.setenv(SAFE_PATH_ENV_VAR, raw)
    assert RulesConfig.from_env().castling_requires_safe_path is True


@pytest.mark.parametrize("raw", ["0", "false", "no", "", "maybe"])
def test_switch_off_from_env(monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
    monkeypatch.setenv(SAFE_PATH_ENV_VAR, raw)
    assert RulesConfig.from_env().castling_requires_safe_path is False


def test_env_var_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(SAFE_PATH_ENV_VAR, raising=False)
    assert RulesConfig.from_env() == DEFAULT_RULES
