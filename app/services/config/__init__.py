"""Configuration objects for the S3 client, the state bucket target and the settings file.

Import them from here rather than from the individual modules.
"""

from app.services.config.backend_target import BackendTarget
from app.services.config.s3_config import S3Config
from app.services.config.settings_store_config import SettingsStoreConfig

__all__ = ["BackendTarget", "S3Config", "SettingsStoreConfig"]
