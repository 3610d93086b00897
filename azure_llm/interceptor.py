"""Outbound request interception for Azure OpenAI resources.

Azure OpenAI rejects chat-completions calls that lack the ``api-version``
query parameter, while OpenAI-compatible clients have no notion of it.  The
:class:`RequestInterceptor` wraps the HTTP send path (``httpx.Client.send``
and ``httpx.AsyncClient.send`` by default) and, for every call aimed at a
registered resource, re-issues the request with the registered version
appended to the query string.  Every other call is delegated untouched.

The call input may take any of the forms httpx accepts (``str``,
:class:`httpx.URL` or :class:`httpx.Request`); keyword arguments are the call
options.  Both are normalized into a :class:`RequestDescriptor` once, and the
rewritten descriptor is turned back into the same form before delegation.
"""
from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass, field, replace
from functools import wraps
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import httpx

from .registry import ResourceRegistry, classify_endpoint, default_registry


_LOGGER = logging.getLogger(__name__)

API_VERSION_PARAM = "api-version"

# Options that override the attributes of an ``httpx.Request`` input.
_REQUEST_OVERRIDES = ("method", "headers", "content", "extensions")


@dataclass(frozen=True)
class RequestDescriptor:
    """Normalized view of an outbound call, whatever form its input took."""

    kind: str
    url: httpx.URL
    method: Optional[str] = None
    headers: Optional[httpx.Headers] = None
    content: Any = None
    stream: Any = None
    extensions: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_call(cls, target: Any, options: Dict[str, Any]) -> Optional["RequestDescriptor"]:
        """Describe ``target``; ``None`` when it is not a form httpx accepts."""

        try:
            if isinstance(target, httpx.Request):
                content = options.get("content")
                headers = options.get("headers")
                return cls(
                    kind="request",
                    url=target.url,
                    method=options.get("method") or target.method,
                    headers=httpx.Headers(headers if headers is not None else target.headers),
                    content=content,
                    stream=target.stream if content is None else None,
                    extensions={**target.extensions, **(options.get("extensions") or {})},
                )
            if isinstance(target, httpx.URL):
                return cls(kind="url", url=target)
            if isinstance(target, str):
                return cls(kind="str", url=httpx.URL(target))
        except (httpx.InvalidURL, TypeError, ValueError):
            _LOGGER.debug("unable to parse outbound url %r", target, exc_info=True)
        return None

    def with_api_version(self, api_version: str) -> "RequestDescriptor":
        return replace(self, url=self.url.copy_add_param(API_VERSION_PARAM, api_version))

    def to_call(self, options: Dict[str, Any]) -> Tuple[Any, Dict[str, Any]]:
        """Rebuild the call input in its original form plus remaining options."""

        if self.kind == "str":
            return str(self.url), options
        if self.kind == "url":
            return self.url, options
        headers = httpx.Headers(self.headers)
        if self.content is not None:
            # The body was replaced, so the old framing headers no longer apply.
            headers.pop("content-length", None)
            headers.pop("transfer-encoding", None)
        request = httpx.Request(
            self.method or "GET",
            self.url,
            headers=headers,
            content=self.content,
            stream=self.stream,
            extensions=self.extensions,
        )
        remaining = {key: value for key, value in options.items() if key not in _REQUEST_OVERRIDES}
        return request, remaining


def rewrite_call(
    target: Any,
    options: Dict[str, Any],
    registry: Optional[ResourceRegistry] = None,
) -> Optional[Tuple[Any, Dict[str, Any]]]:
    """Return the rewritten ``(target, options)`` or ``None`` to pass through.

    A call is rewritten only when it targets a registered Azure resource and
    its URL does not already carry ``api-version``.
    """

    descriptor = RequestDescriptor.from_call(target, options)
    if descriptor is None:
        return None
    match = classify_endpoint(descriptor.url, registry)
    if match is None or API_VERSION_PARAM in descriptor.url.params:
        return None
    rewritten = descriptor.with_api_version(match.api_version)
    _LOGGER.debug("added api-version=%s to request for %s", match.api_version, match.resource_name)
    return rewritten.to_call(options)


@dataclass(frozen=True)
class InterceptionTarget:
    """An attribute holding an HTTP call function.

    ``input_position`` is the index of the call input among the positional
    arguments; ``1`` for methods patched on a class (after ``self``).  When
    fewer positional arguments are given, the input is looked up by
    ``input_keyword`` instead, as in ``client.send(request=...)``.
    """

    owner: Any
    attribute: str
    input_position: int = 1
    input_keyword: Optional[str] = "request"


def default_targets() -> List[InterceptionTarget]:
    return [
        InterceptionTarget(httpx.Client, "send"),
        InterceptionTarget(httpx.AsyncClient, "send"),
    ]


@dataclass
class _SavedCall:
    target: InterceptionTarget
    original: Callable[..., Any]
    wrapper: Callable[..., Any]
    owned: bool


class RequestInterceptor:
    """Installs and removes the ``api-version`` rewriting hook.

    Installation is idempotent: a second :meth:`install` never wraps the
    wrapper, and :meth:`uninstall` restores the exact original functions.
    """

    def __init__(
        self,
        targets: Optional[Sequence[InterceptionTarget]] = None,
        registry: Optional[ResourceRegistry] = None,
    ) -> None:
        self._targets = list(targets) if targets is not None else default_targets()
        self._registry = registry if registry is not None else default_registry
        self._saved: List[_SavedCall] = []
        self._installed = False

    @property
    def installed(self) -> bool:
        return self._installed

    def install(self) -> None:
        if self._installed:
            return
        for target in self._targets:
            original = getattr(target.owner, target.attribute)
            owned = target.attribute in vars(target.owner)
            wrapper = self._wrap(original, target)
            setattr(target.owner, target.attribute, wrapper)
            self._saved.append(_SavedCall(target, original, wrapper, owned))
        self._installed = True
        _LOGGER.debug("installed azure request interceptor on %d call path(s)", len(self._saved))

    def uninstall(self) -> None:
        if not self._installed:
            return
        for saved in reversed(self._saved):
            if saved.owned:
                setattr(saved.target.owner, saved.target.attribute, saved.original)
            else:
                delattr(saved.target.owner, saved.target.attribute)
        self._saved = []
        self._installed = False
        _LOGGER.debug("uninstalled azure request interceptor")

    def _rewrite_args(
        self,
        args: Tuple[Any, ...],
        kwargs: Dict[str, Any],
        target: InterceptionTarget,
    ) -> Tuple[Tuple[Any, ...], Dict[str, Any]]:
        position = target.input_position
        if len(args) <= position:
            return args, self._rewrite_keyword_input(kwargs, target.input_keyword)
        rewritten = rewrite_call(args[position], kwargs, self._registry)
        if rewritten is None:
            return args, kwargs
        new_target, new_kwargs = rewritten
        return args[:position] + (new_target,) + args[position + 1:], new_kwargs

    def _rewrite_keyword_input(self, kwargs: Dict[str, Any], keyword: Optional[str]) -> Dict[str, Any]:
        if keyword is None or keyword not in kwargs:
            return kwargs
        options = {key: value for key, value in kwargs.items() if key != keyword}
        rewritten = rewrite_call(kwargs[keyword], options, self._registry)
        if rewritten is None:
            return kwargs
        new_target, new_options = rewritten
        return {**new_options, keyword: new_target}

    def _wrap(self, original: Callable[..., Any], target: InterceptionTarget) -> Callable[..., Any]:
        if inspect.iscoroutinefunction(original):

            @wraps(original)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                args, kwargs = self._rewrite_args(args, kwargs, target)
                return await original(*args, **kwargs)

            return async_wrapper

        @wraps(original)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            args, kwargs = self._rewrite_args(args, kwargs, target)
            return original(*args, **kwargs)

        return wrapper


default_interceptor = RequestInterceptor()


def install_interceptor() -> None:
    """Install the process-wide interceptor on the httpx send path."""

    default_interceptor.install()


def uninstall_interceptor() -> None:
    """Restore the httpx send path (mainly for test isolation)."""

    default_interceptor.uninstall()
