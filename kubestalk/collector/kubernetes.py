"""Kubernetes transport: resource kind resolution and watch streams.

Built on the kubernetes-asyncio dynamic client, so any kind the API server
serves (including custom resources) can be watched. Watches cover all
namespaces; namespace and name filtering happens in the Watcher.
"""

from __future__ import annotations

import re
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Any

from kubestalk.errors import ResolveError
from kubestalk.models.events import EventType, WatchEvent
from kubestalk.observability.logging import get_logger

_logger = get_logger("collector.kubernetes")

_VERSION_RE = re.compile(r"^v\d+((alpha|beta)\d+)?$")

# discovery attributes tried in order, like kubectl does
_SEARCH_FIELDS = ("name", "short_names", "singular_name", "kind")

_EVENT_TYPES = {str(member): member for member in EventType}


@dataclass(frozen=True)
class ResolvedKind:
    """An API resource a resource argument resolved to."""

    group: str
    version: str
    kind: str
    plural: str
    namespaced: bool
    resource: Any = field(default=None, repr=False, compare=False)

    @property
    def api_version(self) -> str:
        return f"{self.group}/{self.version}" if self.group else self.version

    def __str__(self) -> str:
        return f"{self.api_version}, Kind={self.kind}"


def parse_resource_arg(arg: str) -> tuple[str, str, str]:
    """Split ``name[.version].group`` into (name, version, group)."""
    name, _, rest = arg.strip().partition(".")
    version = ""
    group = rest
    head, _, tail = rest.partition(".")
    if head and _VERSION_RE.match(head):
        version, group = head, tail
    return name, version, group


class KubernetesCollector:
    """Connects to a cluster and produces per-kind watch streams.

    Args:
        kubeconfig:     Explicit kubeconfig path; in-cluster config and the
                        default kubeconfig are tried when empty.
        label_selector: Optional label selector applied to every watch.
    """

    def __init__(self, kubeconfig: str = "", label_selector: str = "") -> None:
        self._kubeconfig = kubeconfig
        self._label_selector = label_selector
        self._api_client: Any = None
        self._client: Any = None

    async def connect(self) -> None:
        import kubernetes_asyncio.config as k8s_config  # type: ignore[import-untyped]
        from kubernetes_asyncio.client import ApiClient  # type: ignore[import-untyped]
        from kubernetes_asyncio.dynamic import DynamicClient  # type: ignore[import-untyped]

        if self._kubeconfig:
            await k8s_config.load_kube_config(config_file=self._kubeconfig)
            _logger.info("k8s_client_configured", source="kubeconfig", path=self._kubeconfig)
        else:
            try:
                k8s_config.load_incluster_config()
                _logger.info("k8s_client_configured", source="in-cluster")
            except k8s_config.ConfigException:
                await k8s_config.load_kube_config()
                _logger.info("k8s_client_configured", source="kubeconfig")

        self._api_client = ApiClient()
        self._client = await DynamicClient(self._api_client)

    async def close(self) -> None:
        if self._api_client is not None:
            await self._api_client.close()
            self._api_client = None
            self._client = None

    async def resolve(self, arg: str) -> ResolvedKind:
        """Resolve a resource argument such as ``deploy`` or ``certificates.cert-manager.io``.

        Discovery data is refreshed once if nothing matches.

        Raises:
            ResolveError: no (or an ambiguous) resource matches *arg*.
        """
        if self._client is None:
            raise RuntimeError("collector is not connected")

        resolved = await self._search(arg)
        if resolved is None:
            _logger.debug("resolve_retry", resource=arg)
            await self._client.resources.invalidate_cache()
            resolved = await self._search(arg)

        if resolved is None:
            raise ResolveError(arg)

        _logger.debug("resolved", resource=arg, group=resolved.group, version=resolved.version, kind=resolved.kind)
        return resolved

    async def _search(self, arg: str) -> ResolvedKind | None:
        name, version, group = parse_resource_arg(arg)

        for search_field in _SEARCH_FIELDS:
            criteria: dict[str, Any] = {search_field: [name] if search_field == "short_names" else name}
            if group:
                criteria["group"] = group
            if version:
                criteria["api_version"] = version

            try:
                found = await self._client.resources.search(**criteria)
            except Exception as exc:
                raise ResolveError(arg, exc) from exc

            # skip the synthetic "*List" resources discovery reports as well
            candidates = [res for res in found if not str(getattr(res, "kind", "")).endswith("List")]
            if not candidates:
                continue

            preferred = [res for res in candidates if getattr(res, "preferred", False)]
            resource = (preferred or candidates)[0]
            return ResolvedKind(
                group=resource.group or "",
                version=resource.api_version,
                kind=resource.kind,
                plural=resource.name,
                namespaced=bool(resource.namespaced),
                resource=resource,
            )

        return None

    async def events(self, kind: ResolvedKind) -> AsyncIterator[WatchEvent]:
        """Watch *kind* across all namespaces until cancelled.

        The watch is re-established from the last seen resourceVersion when
        the server closes it.
        """
        if self._client is None:
            raise RuntimeError("collector is not connected")

        resource_version: str | None = None
        while True:
            stream = self._client.watch(
                kind.resource,
                label_selector=self._label_selector or None,
                resource_version=resource_version,
            )
            async for raw_event in stream:
                event = self._to_event(raw_event)
                if event is None:
                    continue
                if isinstance(event.object, dict):
                    metadata = event.object.get("metadata") or {}
                    resource_version = metadata.get("resourceVersion") or resource_version
                yield event

            _logger.debug("watch_restarted", kind=str(kind), resource_version=resource_version)

    @staticmethod
    def _to_event(raw_event: Any) -> WatchEvent | None:
        if not isinstance(raw_event, dict):
            return None

        event_type = _EVENT_TYPES.get(str(raw_event.get("type", "")))
        if event_type is None:
            # BOOKMARK and ERROR events carry no object change
            _logger.debug("watch_event_ignored", event_type=raw_event.get("type"))
            return None

        payload = raw_event.get("raw_object")
        if payload is None:
            obj = raw_event.get("object")
            payload = obj.to_dict() if hasattr(obj, "to_dict") else obj

        return WatchEvent(type=event_type, object=payload)
