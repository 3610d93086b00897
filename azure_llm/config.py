"""Load an Azure OpenAI provider configuration.

Configuration is resolved in the following order:

1. An explicit mapping passed to :func:`load_provider_config`.
2. A YAML/JSON file referenced via the ``AZURE_LLM_CONFIG`` environment variable.
3. The ``AZURE_OPENAI_*`` environment variables (see :mod:`azure_llm.env`).

The YAML/JSON configuration supports the shape::

    resource_name: contoso
    api_key: ${AZURE_OPENAI_API_KEY}
    api_version: 2024-08-01-preview
    deployments:
      - name: gpt-4o
        display_name: GPT-4o
        input: [text, image]

``endpoint: https://contoso.openai.azure.com`` may replace ``resource_name``
and a single ``deployment_name`` may replace the ``deployments`` list.
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .builder import build_provider, build_provider_multi_deployment
from .core import AzureConfig, ProviderConfig
from .env import parse_resource_name, resolve_from_env

CONFIG_ENV_VAR = "AZURE_LLM_CONFIG"


def load_provider_config(
    config: Optional[Mapping[str, Any]] = None,
    env: Optional[Mapping[str, str]] = None,
) -> Optional[ProviderConfig]:
    """Return the configured provider, or ``None`` when Azure is not configured."""

    env = os.environ if env is None else env
    if config is None:
        config_path = env.get(CONFIG_ENV_VAR)
        if config_path:
            path = Path(config_path)
            if not path.exists():
                raise FileNotFoundError(f"Configured {CONFIG_ENV_VAR} file not found: {config_path}")
            config = read_config_file(path)
    if config is not None:
        return provider_from_mapping(config)
    resolved = resolve_from_env(env)
    if resolved is None:
        return None
    return build_provider(resolved)


def read_config_file(path: Path) -> Dict[str, Any]:
    """Read a JSON or YAML configuration file and expand ``${VAR}`` references.

    Malformed content and non-mapping roots raise :class:`ValueError`.
    """

    content = path.read_text(encoding="utf-8")
    if not content.strip():
        return {}
    # Try JSON first; YAML is a superset but reports JSON errors poorly.
    try:
        data = json.loads(content)
    except json.JSONDecodeError:
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as exc:
            raise ValueError(f"Failed to parse configuration file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Configuration root in {path} must be a mapping")
    return _expand_env(data)


def provider_from_mapping(settings: Mapping[str, Any]) -> ProviderConfig:
    """Build a provider from a configuration mapping."""

    resource_name = settings.get("resource_name")
    if not resource_name and settings.get("endpoint"):
        resource_name = parse_resource_name(str(settings["endpoint"]))
    if not resource_name:
        raise ValueError("Azure configuration requires 'resource_name' or an 'endpoint'")

    deployments = settings.get("deployments")
    if deployments is not None:
        return build_provider_multi_deployment(
            resource_name,
            deployments,
            api_key=settings.get("api_key"),
            api_version=settings.get("api_version"),
        )

    deployment_name = settings.get("deployment_name")
    if not deployment_name:
        raise ValueError("Azure configuration requires 'deployment_name' or a 'deployments' list")
    return build_provider(
        AzureConfig(
            resource_name=resource_name,
            deployment_name=deployment_name,
            api_version=settings.get("api_version"),
            api_key=settings.get("api_key"),
            model_name=settings.get("model_name"),
            reasoning=settings.get("reasoning"),
            input=settings.get("input"),
            context_window=settings.get("context_window"),
            max_tokens=settings.get("max_tokens"),
        )
    )


def _expand_env(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _expand_env(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_expand_env(item) for item in value]
    if isinstance(value, str):
        return os.path.expandvars(value)
    return value
