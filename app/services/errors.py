"""Error taxonomy shared by the service layer.

Remote failures surface as ``ProviderError``, a failed provisioning step as
``ProvisioningError``, a bad settings field as ``SettingsValidationError`` and
local settings file problems as ``SettingsStoreError`` subclasses.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.services.setup.s3_setup_service import ProvisioningStep


class ProviderError(RuntimeError):
    pass


class ProviderNotSupportedError(ProviderError):
    pass


class ProvisioningError(RuntimeError):
    """A named provisioning step failed.

    The underlying exception is available as ``__cause__`` (and ``cause``).
    """

    def __init__(self, step: "ProvisioningStep", cause: BaseException) -> None:
        super().__init__(f"Provisioning step '{step.value}' failed: {cause}")
        self.step = step
        self.cause = cause


class SettingsValidationError(ValueError):
    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"{field}: {reason}")
        self.field = field
        self.reason = reason


class SettingsStoreError(RuntimeError):
    pass


class SettingsNotFoundError(SettingsStoreError):
    pass


class SettingsParseError(SettingsStoreError):
    pass


class SettingsReadError(SettingsStoreError):
    pass
