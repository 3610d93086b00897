"""Resolve Azure OpenAI settings from environment variables."""
from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Mapping, Optional

from .core import DEFAULT_API_VERSION, AzureConfig


@dataclass(frozen=True)
class AzureEnvNames:
    """Names of the environment variables read by :func:`resolve_from_env`."""

    api_key: str = "AZURE_OPENAI_API_KEY"
    resource_name: str = "AZURE_OPENAI_RESOURCE_NAME"
    deployment_name: str = "AZURE_OPENAI_DEPLOYMENT_NAME"
    api_version: str = "AZURE_OPENAI_API_VERSION"
    endpoint: str = "AZURE_OPENAI_ENDPOINT"


AZURE_OPENAI_ENV = AzureEnvNames()

_ENDPOINT_RESOURCE = re.compile(r"https://([^.]+)\.openai\.azure\.com")


def parse_resource_name(endpoint: str) -> Optional[str]:
    """Extract the resource label from an ``https://<label>.openai.azure.com`` URL."""

    match = _ENDPOINT_RESOURCE.search(endpoint)
    return match.group(1) if match else None


def _read(env: Mapping[str, str], name: str) -> Optional[str]:
    value = env.get(name)
    if value is None:
        return None
    return value.strip() or None


def resolve_from_env(env: Optional[Mapping[str, str]] = None) -> Optional[AzureConfig]:
    """Build an :class:`AzureConfig` from ``env`` (defaults to ``os.environ``).

    Returns ``None`` unless an API key, a resource name (given directly or
    parsed from ``AZURE_OPENAI_ENDPOINT``) and a deployment name are present.
    """

    env = os.environ if env is None else env
    api_key = _read(env, AZURE_OPENAI_ENV.api_key)
    resource_name = _read(env, AZURE_OPENAI_ENV.resource_name)
    deployment_name = _read(env, AZURE_OPENAI_ENV.deployment_name)
    api_version = _read(env, AZURE_OPENAI_ENV.api_version)

    endpoint = _read(env, AZURE_OPENAI_ENV.endpoint)
    if not resource_name and endpoint:
        resource_name = parse_resource_name(endpoint)

    if not api_key or not resource_name or not deployment_name:
        return None

    return AzureConfig(
        resource_name=resource_name,
        deployment_name=deployment_name,
        api_version=api_version or DEFAULT_API_VERSION,
        api_key=api_key,
    )
