"""Provider configuration builders for Azure OpenAI.

Azure OpenAI serves chat completions from::

    https://{resource}.openai.azure.com/openai/deployments/{deployment}/chat/completions?api-version={version}

The builders point ``base_url`` at the deployment path so an OpenAI-compatible
client appends ``/chat/completions`` itself.  The ``api-version`` parameter is
added on the wire by :mod:`azure_llm.interceptor`, which is why every builder
registers the resource and installs the interceptor before returning.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Optional, Union

from .core import (
    DEFAULT_API_VERSION,
    DEFAULT_CONTEXT_WINDOW,
    DEFAULT_COST,
    DEFAULT_MAX_TOKENS,
    AzureConfig,
    DeploymentSpec,
    InputModality,
    ModelDefinition,
    ProviderConfig,
)
from .interceptor import RequestInterceptor, default_interceptor
from .registry import ResourceRegistry, default_registry


_LOGGER = logging.getLogger(__name__)

_FALLBACK_DEPLOYMENT = "default"


def build_base_url(resource_name: str) -> str:
    """Return the root URL of an Azure OpenAI resource."""

    return f"https://{resource_name}.openai.azure.com"


def build_endpoint(resource_name: str, deployment_name: str, api_version: str = DEFAULT_API_VERSION) -> str:
    """Return the full chat-completions URL, ``api-version`` included."""

    return (
        f"{build_base_url(resource_name)}/openai/deployments/{deployment_name}"
        f"/chat/completions?api-version={api_version}"
    )


def _deployment_url(resource_name: str, deployment_name: str) -> str:
    return f"{build_base_url(resource_name)}/openai/deployments/{deployment_name}"


def _model_definition(
    deployment_name: str,
    display_name: Optional[str],
    reasoning: Optional[bool],
    modalities: Optional[List[InputModality]],
    context_window: Optional[int],
    max_tokens: Optional[int],
) -> ModelDefinition:
    # Only missing values fall back to defaults; explicit empty or zero values are kept.
    return ModelDefinition(
        id=deployment_name,
        name=display_name if display_name is not None else f"Azure {deployment_name}",
        reasoning=reasoning if reasoning is not None else False,
        input=modalities if modalities is not None else ["text"],
        cost=DEFAULT_COST,
        context_window=context_window if context_window is not None else DEFAULT_CONTEXT_WINDOW,
        max_tokens=max_tokens if max_tokens is not None else DEFAULT_MAX_TOKENS,
    )


def build_model_definition(config: AzureConfig) -> ModelDefinition:
    """Create the model definition for a single deployment."""

    return _model_definition(
        config.deployment_name,
        config.model_name,
        config.reasoning,
        config.input,
        config.context_window,
        config.max_tokens,
    )


def _deployment_model_definition(deployment: DeploymentSpec) -> ModelDefinition:
    return _model_definition(
        deployment.name,
        deployment.display_name,
        deployment.reasoning,
        deployment.input,
        deployment.context_window,
        deployment.max_tokens,
    )


def _ensure_deployment(deployment: Union[DeploymentSpec, Mapping[str, Any], str]) -> DeploymentSpec:
    if isinstance(deployment, DeploymentSpec):
        return deployment
    if isinstance(deployment, str):
        return DeploymentSpec(name=deployment)
    if not isinstance(deployment, Mapping):
        raise ValueError(f"Deployment entries must be names or mappings, got {type(deployment).__name__}")
    return DeploymentSpec(**dict(deployment))


def _prepare_interception(
    resource_name: str,
    api_version: str,
    registry: Optional[ResourceRegistry],
    interceptor: Optional[RequestInterceptor],
) -> None:
    (registry if registry is not None else default_registry).register(resource_name, api_version)
    (interceptor if interceptor is not None else default_interceptor).install()


def _provider_config(
    base_url: str,
    resource_name: str,
    api_key: Optional[str],
    api_version: str,
    models: List[ModelDefinition],
) -> ProviderConfig:
    return ProviderConfig(
        base_url=base_url,
        api_key=api_key,
        auth_header=False,
        headers={"api-key": api_key or ""},
        azure_resource_name=resource_name,
        azure_api_version=api_version,
        models=models,
    )


def build_provider(
    config: AzureConfig,
    *,
    registry: Optional[ResourceRegistry] = None,
    interceptor: Optional[RequestInterceptor] = None,
) -> ProviderConfig:
    """Build the provider configuration for a single deployment."""

    api_version = config.api_version or DEFAULT_API_VERSION
    base_url = _deployment_url(config.resource_name, config.deployment_name)
    _prepare_interception(config.resource_name, api_version, registry, interceptor)
    _LOGGER.debug("built azure provider for %s/%s", config.resource_name, config.deployment_name)
    return _provider_config(
        base_url,
        config.resource_name,
        config.api_key,
        api_version,
        [build_model_definition(config)],
    )


def build_provider_multi_deployment(
    resource_name: str,
    deployments: Iterable[Union[DeploymentSpec, Mapping[str, Any], str]],
    *,
    api_key: Optional[str] = None,
    api_version: Optional[str] = None,
    registry: Optional[ResourceRegistry] = None,
    interceptor: Optional[RequestInterceptor] = None,
) -> ProviderConfig:
    """Build one provider configuration covering several deployments.

    ``base_url`` is scoped to the first deployment (``"default"`` when there
    are none); a model definition is still returned for every deployment.
    """

    specs = [_ensure_deployment(deployment) for deployment in deployments]
    api_version = api_version or DEFAULT_API_VERSION
    first = specs[0].name if specs else _FALLBACK_DEPLOYMENT
    base_url = _deployment_url(resource_name, first)
    _prepare_interception(resource_name, api_version, registry, interceptor)
    _LOGGER.debug("built azure provider for %s with %d deployment(s)", resource_name, len(specs))
    return _provider_config(
        base_url,
        resource_name,
        api_key,
        api_version,
        [_deployment_model_definition(spec) for spec in specs],
    )
