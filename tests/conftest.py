"""
Pytest configuration and shared fixtures.
"""

import gzip
import os
from datetime import datetime
from pathlib import Path
from types import SimpleNamespace

import pytest
from kubernetes.client.rest import ApiException


def write_log(path: Path, lines, mtime: float | None = None, compress: bool = False) -> Path:
    """Write log lines to a (optionally gzip-compressed) file and set its mtime."""
    data = "".join(f"{line}\n" for line in lines).encode("utf-8")
    if compress:
        with gzip.open(path, "wb") as f:
            f.write(data)
    else:
        path.write_bytes(data)
    if mtime is not None:
        os.utime(path, (mtime, mtime))
    return path


@pytest.fixture
def year() -> int:
    return datetime.now().year


def condition(type_: str, status: str, when: datetime | None):
    return SimpleNamespace(type=type_, status=status, last_transition_time=when)


def k8s_object(created: datetime | None = None, conditions=None, name: str = "obj"):
    return SimpleNamespace(
        metadata=SimpleNamespace(name=name, creation_timestamp=created),
        status=SimpleNamespace(conditions=conditions),
    )


class FakeCoreV1Api:
    """In-memory stand-in for kubernetes.client.CoreV1Api."""

    def __init__(self, pods=None, node=None, node_error: ApiException | None = None, pod_error: ApiException | None = None):
        self.pods = pods or []
        self.pod_error = pod_error
        self.node = node
        self.node_error = node_error
        self.pod_queries = []
        self.node_queries = []

    def list_namespaced_pod(self, namespace, field_selector=None):
        self.pod_queries.append((namespace, field_selector))
        if self.pod_error is not None:
            raise self.pod_error
        return SimpleNamespace(items=list(self.pods))

    def read_node(self, name):
        self.node_queries.append(name)
        if self.node_error is not None:
            raise self.node_error
        if self.node is None:
            raise ApiException(status=404, reason="Not Found")
        return self.node
