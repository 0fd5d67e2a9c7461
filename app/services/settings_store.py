from __future__ import annotations

import contextlib
import logging
import os
import tempfile
from pathlib import Path

import yaml

from app.models.settings import SettingsDocument
from app.services.config import SettingsStoreConfig
from app.services.errors import (
    SettingsNotFoundError,
    SettingsParseError,
    SettingsReadError,
    SettingsStoreError,
    SettingsValidationError,
)
from app.services.settings_validator import parse_settings


logger = logging.getLogger(__name__)

# API keys may live in the file.
_FILE_MODE = 0o600


class SettingsStore:
    """Reads and writes the one settings document kept per user."""

    def __init__(self, config: SettingsStoreConfig) -> None:
        self._config = config

    @property
    def path(self) -> Path:
        return self._config.path

    def exists(self) -> bool:
        try:
            return self.path.is_file()
        except OSError:
            return False

    def save(self, document: SettingsDocument) -> None:
        data = yaml.safe_dump(document.model_dump(mode="json"), sort_keys=False)

        tmp_path: str | None = None
        try:
            # Written beside the target so os.replace stays on one filesystem.
            fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".scia-", suffix=".tmp")
            os.fchmod(fd, _FILE_MODE)
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(data)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_path, self.path)
        except OSError as exc:
            if tmp_path is not None:
                with contextlib.suppress(FileNotFoundError):
                    os.unlink(tmp_path)
            logger.exception("Failed to write settings file: %s", self.path)
            raise SettingsStoreError(f"Failed to write settings file: {self.path}") from exc

    def load(self) -> SettingsDocument:
        """Load the stored document.

        Raises:
            SettingsNotFoundError: no settings file exists.
            SettingsReadError: the file exists but cannot be read.
            SettingsParseError: malformed YAML or a structurally invalid document.
        """

        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise SettingsNotFoundError(f"Settings file not found at {self.path}") from exc
        except OSError as exc:
            raise SettingsReadError(f"Failed to read settings file: {self.path}") from exc

        try:
            data = yaml.safe_load(raw)
        except yaml.YAMLError as exc:
            raise SettingsParseError(f"Failed to parse settings file: {self.path}") from exc

        if not isinstance(data, dict):
            raise SettingsParseError(f"Settings file does not contain a mapping: {self.path}")

        try:
            return parse_settings(data)
        except SettingsValidationError as exc:
            raise SettingsParseError(f"Invalid settings file {self.path}: {exc}") from exc
