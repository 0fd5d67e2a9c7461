from __future__ import annotations

from typing import Any

import pytest

from app.models.settings import SettingsDocument
from tests.fakes import valid_settings_data


@pytest.fixture
def settings_data() -> dict[str, Any]:
    return valid_settings_data()


@pytest.fixture
def settings_document() -> SettingsDocument:
    return SettingsDocument.model_validate(valid_settings_data())


@pytest.fixture
def settings_path(tmp_path, monkeypatch):
    path = tmp_path / ".scia.yaml"
    monkeypatch.setenv("SCIA_CONFIG_PATH", str(path))
    return path
