"""Configuration for node latency measurement."""

import os
from pathlib import Path

import toml
from pydantic import BaseModel, Field

from .sources import journal, messages

# Bundled default event catalog
DEFAULT_CATALOG_PATH = Path(__file__).parent / "default_events.yaml"


class NodeLatencyConfig(BaseModel):
    """Main configuration: where evidence lives and which node is measured."""

    node_name: str = Field(
        default_factory=lambda: os.environ.get("NODE_NAME", ""),
        description="Node to measure (defaults to the NODE_NAME environment variable)",
    )
    pod_namespace: str = Field(default="default", description="Namespace searched for pods scheduled to the node")

    # Log locations, globs resolve rotated copies
    journal_path: str = Field(default=journal.DEFAULT_PATH, description="Glob for the systemd journal directory")
    messages_path: str = Field(default=messages.DEFAULT_PATH, description="Glob for /var/log/messages and its rotations")

    # Cluster API
    enable_k8s: bool = Field(default=True, description="Query the Kubernetes API for pod and node events")
    kubeconfig: str | None = Field(default=None, description="Kubeconfig path (in-cluster config is used when unset)")
    kube_context: str | None = Field(default=None, description="Kubeconfig context")

    catalog_path: str | None = Field(default=None, description="YAML event catalog (bundled default when unset)")

    @classmethod
    def from_toml(cls, path: str) -> "NodeLatencyConfig":
        """Load configuration from a TOML file."""
        with open(path, "r") as f:
            config_data = toml.load(f)
        return cls(**config_data)

    def resolved_catalog_path(self) -> Path:
        return Path(self.catalog_path) if self.catalog_path else DEFAULT_CATALOG_PATH
