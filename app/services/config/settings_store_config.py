from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar


@dataclass(frozen=True)
class SettingsStoreConfig:
    """Location of the single per-user settings file."""

    path: Path
    _DEFAULT_FILENAME: ClassVar[str] = ".scia.yaml"

    @staticmethod
    def from_env() -> "SettingsStoreConfig":
        override = os.getenv("SCIA_CONFIG_PATH")
        if override:
            return SettingsStoreConfig(path=Path(override).expanduser())

        return SettingsStoreConfig(path=Path.home() / SettingsStoreConfig._DEFAULT_FILENAME)
