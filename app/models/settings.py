from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class _Section(BaseModel):
    # Sections for unselected providers may still be present in the file.
    model_config = ConfigDict(extra="ignore")


class OllamaSettings(_Section):
    url: str = ""
    model: str = ""
    use_docker: bool = False


class GeminiSettings(_Section):
    api_key: str = ""
    model: str = ""


class OpenAISettings(_Section):
    api_key: str = ""
    model: str = ""


class OllamaLLMSettings(_Section):
    provider: Literal["ollama"] = "ollama"
    ollama: OllamaSettings = Field(default_factory=OllamaSettings)


class GeminiLLMSettings(_Section):
    provider: Literal["gemini"] = "gemini"
    gemini: GeminiSettings = Field(default_factory=GeminiSettings)


class OpenAILLMSettings(_Section):
    provider: Literal["openai"] = "openai"
    openai: OpenAISettings = Field(default_factory=OpenAISettings)


LLMSettings = Annotated[
    Union[OllamaLLMSettings, GeminiLLMSettings, OpenAILLMSettings],
    Field(discriminator="provider"),
]


class AwsCloudSettings(_Section):
    provider: Literal["aws"] = "aws"
    default_region: str = ""


class GcpCloudSettings(_Section):
    provider: Literal["gcp"] = "gcp"


CloudSettings = Annotated[
    Union[AwsCloudSettings, GcpCloudSettings],
    Field(discriminator="provider"),
]


class S3BackendSettings(_Section):
    type: Literal["s3"]
    s3_bucket: str = ""
    s3_region: str = ""
    s3_key: str = ""


class TerraformSettings(_Section):
    binary: str = ""
    backend: S3BackendSettings


class SettingsDocument(_Section):
    """The persisted tool configuration (``~/.scia.yaml``).

    ``llm`` and ``cloud`` are tagged by their ``provider`` field; only the
    variant matching the active provider carries fields.
    """

    llm: LLMSettings
    cloud: CloudSettings
    terraform: TerraformSettings

    @staticmethod
    def default() -> "SettingsDocument":
        return SettingsDocument(
            llm=OllamaLLMSettings(
                ollama=OllamaSettings(
                    url="http://localhost:11434",
                    model="qwen2.5-coder:7b",
                    use_docker=True,
                )
            ),
            cloud=AwsCloudSettings(default_region="eu-west-3"),
            terraform=TerraformSettings(
                binary="tofu",
                backend=S3BackendSettings(type="s3", s3_key="terraform.tfstate"),
            ),
        )


class SettingsValidationResponse(BaseModel):
    valid: bool
