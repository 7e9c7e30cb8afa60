"""Event catalog loading.

A catalog is a YAML document listing the events to time:

    events:
      - name: Kubelet Start
        metric: kubelet_start
        src: Journal
        pattern: '(?m)^.*Started kubelet.*$'
        matchSelector: first
      - name: Node Ready
        metric: node_ready
        src: K8s
        match: node_ready
        terminal: true

Log sources take a regex ``pattern``; the Kubernetes source takes a named
``match`` lookup.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List

import yaml

from .config import NodeLatencyConfig
from .sources import (
    Event,
    JournalSource,
    K8sSource,
    MessagesSource,
    Source,
    comment_matched_line,
    new_core_v1_api,
)

logger = logging.getLogger("node_latency.catalog")

K8S_MATCHERS = {
    "pod_created": "find_pod_creation_time",
    "pod_scheduled": "find_pod_scheduled_time",
    "pod_ready": "find_pod_ready_time",
    "node_registered": "find_node_register_time",
    "node_ready": "find_node_ready_time",
}


def build_sources(cfg: NodeLatencyConfig, core_api=None) -> Dict[str, Source]:
    """Instantiate every enabled source keyed by its name.

    Args:
        cfg: Configuration with log paths and cluster settings.
        core_api: Optional CoreV1Api; built from the kubeconfig when omitted.

    Returns:
        Dict mapping source name -> Source
    """
    srcs: List[Source] = [
        JournalSource(cfg.journal_path),
        MessagesSource(cfg.messages_path),
    ]
    if cfg.enable_k8s:
        if not cfg.node_name:
            raise ValueError("node_name is required to query the Kubernetes API (set NODE_NAME)")
        api = core_api or new_core_v1_api(cfg.kubeconfig, cfg.kube_context)
        srcs.append(K8sSource(api, cfg.node_name, cfg.pod_namespace))
    return {src.name(): src for src in srcs}


def _match_fn(entry: Dict[str, Any], source: Source):
    if "pattern" in entry:
        if not hasattr(source, "find_by_regex"):
            raise ValueError(f"event {entry['name']!r}: source {source.name()} does not support regex patterns")
        return source.find_by_regex(entry["pattern"])
    if "match" in entry:
        method = K8S_MATCHERS.get(entry["match"])
        if method is None or not hasattr(source, method):
            raise ValueError(f"event {entry['name']!r}: unknown match {entry['match']!r} for source {source.name()}")
        return getattr(source, method)()
    raise ValueError(f"event {entry['name']!r} needs either a pattern or a match")


def _comment_fn(entry: Dict[str, Any]):
    comment = entry.get("comment")
    if comment is None:
        return None
    if comment == "line":
        return comment_matched_line()
    raise ValueError(f"event {entry['name']!r}: unsupported comment {comment!r}")


def parse_catalog(data: Any, sources: Dict[str, Source]) -> List[Event]:
    """Bind catalog entries to sources.

    Entries whose source is not in ``sources`` (e.g. K8s when the API is
    disabled) are skipped.

    Raises:
        ValueError: If an entry is malformed.
    """
    entries = data.get("events", []) if isinstance(data, dict) else data
    if not isinstance(entries, list):
        raise ValueError("catalog must be a list of events or a mapping with an 'events' list")

    events = []
    for entry in entries:
        if not isinstance(entry, dict) or "name" not in entry or "src" not in entry:
            raise ValueError(f"catalog entry needs at least a name and a src: {entry!r}")
        source = sources.get(entry["src"])
        if source is None:
            logger.info(f"Skipping event {entry['name']!r}: source {entry['src']} is not enabled")
            continue
        events.append(
            Event(
                name=entry["name"],
                metric=entry.get("metric", ""),
                match_selector=entry.get("matchSelector", "first"),
                terminal=bool(entry.get("terminal", False)),
                src_name=entry["src"],
                src=source,
                match_fn=_match_fn(entry, source),
                comment_fn=_comment_fn(entry),
            )
        )
    return events


def load_catalog(path: str | Path, sources: Dict[str, Source]) -> List[Event]:
    """Load a YAML event catalog and bind it to sources."""
    path = Path(path)
    logger.info(f"Loading event catalog from: {path}")
    with open(path) as f:
        data = yaml.safe_load(f)
    events = parse_catalog(data or [], sources)
    logger.info(f"Loaded {len(events)} events")
    return events
