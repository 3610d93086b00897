"""Azure OpenAI support for OpenAI-compatible chat-completions clients.

Azure OpenAI differs from the canonical OpenAI API in three ways: the
deployment lives in the URL path, the key travels in an ``api-key`` header,
and every request must carry an ``api-version`` query parameter.  This
package covers all three:

* :func:`build_provider` / :func:`build_provider_multi_deployment` turn Azure
  parameters into a :class:`ProviderConfig` whose ``base_url`` and headers an
  OpenAI-compatible client can use as-is.
* Building a provider registers the resource and installs a
  :class:`RequestInterceptor` on the httpx send path, which appends the
  registered ``api-version`` to every request aimed at that resource.
* :func:`resolve_from_env` and :func:`load_provider_config` derive the
  parameters from ``AZURE_OPENAI_*`` environment variables or a YAML/JSON
  file referenced by ``AZURE_LLM_CONFIG``.

Importing the package never patches anything; the interceptor is installed
lazily by the builders.
"""
from __future__ import annotations

from .builder import (
    build_base_url,
    build_endpoint,
    build_model_definition,
    build_provider,
    build_provider_multi_deployment,
)
from .config import load_provider_config
from .core import (
    COMMON_MODELS,
    DEFAULT_API_VERSION,
    DEFAULT_CONTEXT_WINDOW,
    DEFAULT_COST,
    DEFAULT_MAX_TOKENS,
    AzureConfig,
    DeploymentSpec,
    ModelCost,
    ModelDefinition,
    ProviderConfig,
    common_model,
)
from .env import AZURE_OPENAI_ENV, resolve_from_env
from .interceptor import RequestInterceptor, install_interceptor, uninstall_interceptor
from .registry import ResourceRegistry, classify_endpoint, register_resource

__all__ = [
    "AZURE_OPENAI_ENV",
    "COMMON_MODELS",
    "DEFAULT_API_VERSION",
    "DEFAULT_CONTEXT_WINDOW",
    "DEFAULT_COST",
    "DEFAULT_MAX_TOKENS",
    "AzureConfig",
    "DeploymentSpec",
    "ModelCost",
    "ModelDefinition",
    "ProviderConfig",
    "RequestInterceptor",
    "ResourceRegistry",
    "build_base_url",
    "build_endpoint",
    "build_model_definition",
    "build_provider",
    "build_provider_multi_deployment",
    "classify_endpoint",
    "common_model",
    "install_interceptor",
    "load_provider_config",
    "register_resource",
    "resolve_from_env",
    "uninstall_interceptor",
]
