from __future__ import annotations

import re
from typing import Any, Callable, Mapping

import pydantic

from app.models.settings import (
    AwsCloudSettings,
    CloudSettings,
    GeminiLLMSettings,
    LLMSettings,
    OllamaLLMSettings,
    OpenAILLMSettings,
    SettingsDocument,
    TerraformSettings,
)
from app.services.errors import SettingsValidationError

# e.g. us-east-1, eu-west-3
AWS_REGION_PATTERN = re.compile(r"^[a-z]{2}-[a-z]+-\d$")
# 3-63 chars, lowercase, no underscores, no leading/trailing hyphen
S3_BUCKET_PATTERN = re.compile(r"^[a-z0-9][a-z0-9-]{1,61}[a-z0-9]$")

LLM_PROVIDERS = ("ollama", "gemini", "openai")
CLOUD_PROVIDERS = ("aws", "gcp")
TERRAFORM_BINARIES = ("terraform", "tofu")
BACKEND_TYPES = ("s3",)

_TAG_ERRORS = {"union_tag_invalid", "union_tag_not_found"}
_TAG_CHOICES = {
    "llm": LLM_PROVIDERS,
    "cloud": CLOUD_PROVIDERS,
}


def validate_bucket_name(bucket_name: str, *, field: str = "terraform.backend.s3_bucket") -> None:
    if not bucket_name:
        raise SettingsValidationError(field, "is required for s3 backend")
    if not S3_BUCKET_PATTERN.match(bucket_name):
        raise SettingsValidationError(
            field,
            f"invalid s3 bucket name: {bucket_name} (must be 3-63 lowercase alphanumeric characters with hyphens)",
        )


def validate_region_code(region: str, *, field: str) -> None:
    if not region:
        raise SettingsValidationError(field, "is required")
    if not AWS_REGION_PATTERN.match(region):
        raise SettingsValidationError(field, f"invalid aws region format: {region} (expected format: us-east-1)")


def _require(value: str, *, field: str, provider: str) -> None:
    if not value:
        raise SettingsValidationError(field, f"is required when using {provider} provider")


def _validate_llm(llm: Any) -> None:
    if isinstance(llm, OllamaLLMSettings):
        _require(llm.ollama.url, field="llm.ollama.url", provider="ollama")
        _require(llm.ollama.model, field="llm.ollama.model", provider="ollama")
    elif isinstance(llm, GeminiLLMSettings):
        _require(llm.gemini.api_key, field="llm.gemini.api_key", provider="gemini")
        _require(llm.gemini.model, field="llm.gemini.model", provider="gemini")
    elif isinstance(llm, OpenAILLMSettings):
        _require(llm.openai.api_key, field="llm.openai.api_key", provider="openai")
        _require(llm.openai.model, field="llm.openai.model", provider="openai")
    else:
        raise SettingsValidationError("llm.provider", f"must be one of: {', '.join(LLM_PROVIDERS)}")


def _validate_cloud(cloud: Any) -> None:
    if cloud.provider not in CLOUD_PROVIDERS:
        raise SettingsValidationError("cloud.provider", f"must be one of: {', '.join(CLOUD_PROVIDERS)}")

    if isinstance(cloud, AwsCloudSettings):
        if not cloud.default_region:
            raise SettingsValidationError("cloud.default_region", "is required for aws provider")
        validate_region_code(cloud.default_region, field="cloud.default_region")


def _validate_terraform(terraform: TerraformSettings) -> None:
    if not terraform.binary:
        raise SettingsValidationError("terraform.binary", "is required")
    if terraform.binary not in TERRAFORM_BINARIES:
        raise SettingsValidationError("terraform.binary", "must be 'terraform' or 'tofu'")

    backend = terraform.backend
    if backend.type not in BACKEND_TYPES:
        raise SettingsValidationError("terraform.backend.type", "only 's3' backend is supported")

    validate_bucket_name(backend.s3_bucket)
    if not backend.s3_region:
        raise SettingsValidationError("terraform.backend.s3_region", "is required for s3 backend")
    validate_region_code(backend.s3_region, field="terraform.backend.s3_region")
    if not backend.s3_key:
        raise SettingsValidationError("terraform.backend.s3_key", "is required for s3 backend")


def validate_settings(document: SettingsDocument) -> None:
    """Check a settings document, raising on the first violation.

    Sections are checked in order (llm, cloud, terraform) and each stops at
    its first failing field. Fields of unselected providers are never looked at.

    Raises:
        SettingsValidationError: naming the offending field and the rule it broke.
    """

    _validate_llm(document.llm)
    _validate_cloud(document.cloud)
    _validate_terraform(document.terraform)


def _field_from_error(section: str, error: Mapping[str, Any]) -> str:
    loc = [section, *(str(part) for part in error.get("loc", ()))]
    if error.get("type") in _TAG_ERRORS:
        return ".".join([*loc, "provider"])
    # Drop the variant tag pydantic inserts for tagged unions, e.g. ("llm", "ollama", "ollama", "url").
    if len(loc) >= 2 and loc[0] in _TAG_CHOICES and loc[1] in _TAG_CHOICES[loc[0]]:
        loc = [loc[0], *loc[2:]]
    return ".".join(loc)


def _reason_from_error(error: Mapping[str, Any], field: str) -> str:
    section = field.split(".", 1)[0]
    if error.get("type") in _TAG_ERRORS and section in _TAG_CHOICES:
        return f"must be one of: {', '.join(_TAG_CHOICES[section])}"
    if field == "terraform.backend.type" and error.get("type") == "literal_error":
        return "only 's3' backend is supported"
    return str(error.get("msg", "invalid value"))


_SECTIONS: tuple[tuple[str, pydantic.TypeAdapter[Any], Callable[[Any], None]], ...] = (
    ("llm", pydantic.TypeAdapter(LLMSettings), _validate_llm),
    ("cloud", pydantic.TypeAdapter(CloudSettings), _validate_cloud),
    ("terraform", pydantic.TypeAdapter(TerraformSettings), _validate_terraform),
)


def _parse_section(section: str, adapter: pydantic.TypeAdapter[Any], data: Mapping[str, Any]) -> Any:
    if section not in data:
        raise SettingsValidationError(section, "is required")
    try:
        return adapter.validate_python(data[section])
    except pydantic.ValidationError as exc:
        errors = exc.errors()
        first = errors[0] if errors else {}
        field = _field_from_error(section, first)
        raise SettingsValidationError(field, _reason_from_error(first, field)) from exc


def _build(data: Any, *, check_rules: bool) -> SettingsDocument:
    if not isinstance(data, Mapping):
        raise SettingsValidationError("document", "must be a mapping")

    parsed: dict[str, Any] = {}
    for section, adapter, rules in _SECTIONS:
        parsed[section] = _parse_section(section, adapter, data)
        if check_rules:
            rules(parsed[section])
    return SettingsDocument(**parsed)


def parse_settings(data: Mapping[str, Any]) -> SettingsDocument:
    """Build a typed settings document from raw (e.g. YAML/JSON) data.

    Structural problems (missing sections, unknown provider names, wrong value
    types) are reported as ``SettingsValidationError`` for the first offending
    field, in section order. Field rules are not applied.
    """

    return _build(data, check_rules=False)


def validate_settings_data(data: Mapping[str, Any]) -> SettingsDocument:
    """Parse and check raw settings one section at a time (llm, cloud, terraform).

    A section is parsed and then held to its field rules before the next one
    is looked at, so the first violation in section order is the one reported,
    whether it is structural or a field rule.
    """

    return _build(data, check_rules=True)
