"""Shared fixtures for kubestalk integration tests.

Provides a Differ that renders into an in-memory console, wired to a
Dispatcher and Watcher, plus factories for realistic Kubernetes objects,
so the whole notification → cache → diff pipeline runs without a cluster.
"""

from __future__ import annotations

import asyncio
import io
from collections.abc import AsyncIterator, Iterable

import pytest
from rich.console import Console

from kubestalk.cache import ResourceCache
from kubestalk.diff import Differ
from kubestalk.models.config import DiffConfig
from kubestalk.models.events import EventType, WatchEvent
from kubestalk.watcher import Dispatcher, Watcher

# ---------------------------------------------------------------------------
# Object factories
# ---------------------------------------------------------------------------


def make_deployment(
    name: str = "my-app",
    namespace: str = "default",
    replicas: int = 1,
    image: str = "nginx:1.25",
    resource_version: str = "100",
    generation: int = 1,
) -> dict:
    """Create a Deployment object as the API server would send it."""
    return {
        "apiVersion": "apps/v1",
        "kind": "Deployment",
        "metadata": {
            "name": name,
            "namespace": namespace,
            "resourceVersion": resource_version,
            "generation": generation,
            "labels": {"app": name},
            "managedFields": [{"manager": "kube-controller-manager", "operation": "Update"}],
        },
        "spec": {
            "replicas": replicas,
            "selector": {"matchLabels": {"app": name}},
            "template": {
                "metadata": {"labels": {"app": name}},
                "spec": {"containers": [{"name": "app", "image": image}]},
            },
        },
        "status": {"observedGeneration": generation, "replicas": replicas},
    }


def make_configmap(name: str = "settings", namespace: str = "default", data: dict | None = None) -> dict:
    """Create a ConfigMap object."""
    return {
        "apiVersion": "v1",
        "kind": "ConfigMap",
        "metadata": {"name": name, "namespace": namespace, "resourceVersion": "1"},
        "data": data or {"mode": "fast"},
    }


def added(obj: object) -> WatchEvent:
    return WatchEvent(type=EventType.ADDED, object=obj)


def modified(obj: object) -> WatchEvent:
    return WatchEvent(type=EventType.MODIFIED, object=obj)


def deleted(obj: object) -> WatchEvent:
    return WatchEvent(type=EventType.DELETED, object=obj)


async def stream_of(events: Iterable[WatchEvent]) -> AsyncIterator[WatchEvent]:
    """Async notification stream yielding *events*, then ending."""
    for event in events:
        await asyncio.sleep(0)
        yield event


def output_of(console: Console) -> str:
    return console.file.getvalue()  # type: ignore[attr-defined,no-any-return]


def rendered_blocks(console: Console) -> list[str]:
    """Split console output into one block per rendered diff."""
    return [block for block in output_of(console).split("\n\n") if block.strip()]


# ---------------------------------------------------------------------------
# Pipeline fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def console() -> Console:
    return Console(file=io.StringIO(), force_terminal=False, color_system=None, width=200)


@pytest.fixture
def diff_config() -> DiffConfig:
    return DiffConfig()


@pytest.fixture
def differ(diff_config: DiffConfig, console: Console) -> Differ:
    return Differ(diff_config, console=console)


@pytest.fixture
def cache() -> ResourceCache:
    return ResourceCache()


@pytest.fixture
def dispatcher(differ: Differ, cache: ResourceCache) -> Dispatcher:
    return Dispatcher(differ, cache)


@pytest.fixture
def watcher(dispatcher: Dispatcher) -> Watcher:
    return Watcher(dispatcher)
