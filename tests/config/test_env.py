from __future__ import annotations

import pytest

from metadeploy.config import optional_env_var


def test_optional_env_var_returns_none_when_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("EXAMPLE_VAR", raising=False)

    assert optional_env_var("EXAMPLE_VAR") is None


def test_optional_env_var_treats_blank_as_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "  ")

    assert optional_env_var("EXAMPLE_VAR") is None

    monkeypatch.setenv("EXAMPLE_VAR", " set ")

    assert optional_env_var("EXAMPLE_VAR") == "set"
