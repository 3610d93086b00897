"""Registry of Azure OpenAI resources and endpoint classification.

Resources are registered with the API version their requests must carry.
:func:`classify_endpoint` uses the registry to decide whether an outbound URL
targets one of those resources.
"""
from __future__ import annotations

import logging
import re
from typing import Dict, Iterator, Optional, Union

import httpx

from .core import ImmutableModel


_LOGGER = logging.getLogger(__name__)

_AZURE_HOST = re.compile(r"^([^.]+)\.openai\.azure\.com$", re.IGNORECASE)


class EndpointMatch(ImmutableModel):
    """A URL that belongs to a registered Azure OpenAI resource."""

    resource_name: str
    api_version: str


class ResourceRegistry:
    """Case-insensitive mapping of resource name to required API version.

    Registrations are never removed; registering a name again overwrites the
    stored version so a resource can be reconfigured without a restart.
    """

    def __init__(self) -> None:
        self._versions: Dict[str, str] = {}

    def register(self, resource_name: str, api_version: str) -> None:
        key = resource_name.lower()
        previous = self._versions.get(key)
        self._versions[key] = api_version
        if previous != api_version:
            _LOGGER.debug("registered azure resource %s (api-version %s)", key, api_version)

    def get(self, resource_name: str) -> Optional[str]:
        return self._versions.get(resource_name.lower())

    def __contains__(self, resource_name: object) -> bool:
        return isinstance(resource_name, str) and resource_name.lower() in self._versions

    def __len__(self) -> int:
        return len(self._versions)

    def __iter__(self) -> Iterator[str]:
        return iter(self._versions)


default_registry = ResourceRegistry()


def register_resource(resource_name: str, api_version: str) -> None:
    """Register ``resource_name`` with the process-wide registry."""

    default_registry.register(resource_name, api_version)


def classify_endpoint(
    url: Union[str, httpx.URL],
    registry: Optional[ResourceRegistry] = None,
) -> Optional[EndpointMatch]:
    """Return the registration for ``url`` or ``None`` when it is not Azure.

    Only hosts of the exact form ``<label>.openai.azure.com`` match, and the
    label must have been registered.  URLs that fail to parse are treated as
    non-Azure rather than raising.
    """

    registry = registry if registry is not None else default_registry
    try:
        host = httpx.URL(url).host
    except (httpx.InvalidURL, TypeError, ValueError):
        return None
    match = _AZURE_HOST.match(host)
    if not match:
        return None
    resource_name = match.group(1).lower()
    api_version = registry.get(resource_name)
    if api_version is None:
        return None
    return EndpointMatch(resource_name=resource_name, api_version=api_version)
