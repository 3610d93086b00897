"""Core data structures for Azure OpenAI provider configuration.

This module provides the pydantic models that describe the user supplied
Azure parameters (:class:`AzureConfig`, :class:`DeploymentSpec`) and the
records handed to an OpenAI-compatible chat-completions client
(:class:`ProviderConfig`, :class:`ModelDefinition`).  It also carries the
Azure defaults and a small catalog of commonly deployed models.
"""
from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


DEFAULT_API_VERSION = "2024-08-01-preview"
DEFAULT_CONTEXT_WINDOW = 128000
DEFAULT_MAX_TOKENS = 4096

# Marker understood by downstream clients speaking the chat-completions wire format.
OPENAI_COMPLETIONS_API = "openai-completions"

InputModality = Literal["text", "image"]


class ImmutableModel(BaseModel):
    """Base class that freezes models after construction."""

    model_config = ConfigDict(frozen=True)


class ModelCost(ImmutableModel):
    """Per-token pricing.  Azure billing is not modeled, so everything is zero."""

    input: float = 0
    output: float = 0
    cache_read: float = 0
    cache_write: float = 0


DEFAULT_COST = ModelCost()


class ModelDefinition(ImmutableModel):
    """A model entry exposed to the downstream client."""

    id: str
    name: str
    reasoning: bool = False
    input: List[InputModality] = Field(default_factory=lambda: ["text"])
    cost: ModelCost = DEFAULT_COST
    context_window: int = DEFAULT_CONTEXT_WINDOW
    max_tokens: int = DEFAULT_MAX_TOKENS


class AzureConfig(ImmutableModel):
    """Parameters describing a single Azure OpenAI deployment."""

    resource_name: str
    deployment_name: str
    api_version: Optional[str] = None
    api_key: Optional[str] = None
    model_name: Optional[str] = None
    reasoning: Optional[bool] = None
    input: Optional[List[InputModality]] = None
    context_window: Optional[int] = None
    max_tokens: Optional[int] = None

    @field_validator("resource_name", "deployment_name")
    @classmethod
    def _must_not_be_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("resource and deployment names must not be empty")
        return value


class DeploymentSpec(ImmutableModel):
    """One deployment of a multi-deployment provider."""

    name: str
    display_name: Optional[str] = None
    reasoning: Optional[bool] = None
    input: Optional[List[InputModality]] = None
    context_window: Optional[int] = None
    max_tokens: Optional[int] = None

    @field_validator("name")
    @classmethod
    def _name_must_not_be_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("deployment name must not be empty")
        return value


class ProviderConfig(ImmutableModel):
    """Provider configuration consumed by an OpenAI-compatible client.

    ``auth_header`` is ``False`` because Azure rejects ``Authorization: Bearer``;
    the key travels in the ``api-key`` header instead.
    """

    base_url: str
    api: str = OPENAI_COMPLETIONS_API
    api_key: Optional[str] = None
    auth_header: bool = False
    headers: Dict[str, str] = Field(default_factory=dict)
    azure_resource_name: str
    azure_api_version: str
    models: List[ModelDefinition] = Field(default_factory=list)


class CommonModel(ImmutableModel):
    """Catalog entry for a model commonly deployed on Azure OpenAI."""

    reasoning: bool = False
    input: List[InputModality]
    context_window: int = DEFAULT_CONTEXT_WINDOW
    max_tokens: int = DEFAULT_MAX_TOKENS


COMMON_MODELS: Dict[str, CommonModel] = {
    "gpt-5": CommonModel(input=["text", "image"]),
    "gpt-5-mini": CommonModel(input=["text", "image"]),
    "gpt-5-nano": CommonModel(input=["text", "image"]),
    "gpt-5-codex": CommonModel(input=["text"]),
}


def common_model(name: str) -> Optional[CommonModel]:
    """Return the catalog entry for ``name`` if it is a known deployment model."""

    return COMMON_MODELS.get(name)
