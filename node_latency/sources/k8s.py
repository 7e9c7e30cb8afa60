"""
Latency timing source for Kubernetes API objects.

Every lookup is a live query: node and pod state changes between calls, so
nothing is cached and clear_cache() is a no-op.
"""

import logging
from datetime import datetime, timezone
from typing import Any, List, Optional

from kubernetes import client, config
from kubernetes.client.rest import ApiException
from kubernetes.config.config_exception import ConfigException

from ..errors import ConditionNotFoundError, ObjectNotFoundError, TimestampParseError
from .base import FindFunc, FindResult, Source, require_match_fn, select_matches

logger = logging.getLogger("node_latency.sources.k8s")

NAME = "K8s"


def new_core_v1_api(kubeconfig: Optional[str] = None, context: Optional[str] = None) -> client.CoreV1Api:
    """Build a CoreV1Api from a kubeconfig, falling back to in-cluster credentials."""
    try:
        config.load_kube_config(config_file=kubeconfig, context=context)
    except ConfigException:
        logger.debug("No usable kubeconfig, loading in-cluster config")
        config.load_incluster_config()
    return client.CoreV1Api(client.ApiClient())


def _unix(ts: Optional[datetime]) -> str:
    if ts is None:
        return ""
    return str(int(ts.timestamp()))


def _find_condition(conditions: Optional[List[Any]], condition_type: str, kind: str) -> Any:
    for condition in conditions or []:
        if condition.type == condition_type:
            return condition
    raise ConditionNotFoundError(f"unable to find {kind} {condition_type} condition")


class K8sSource(Source):
    """The Kubernetes API source for pod and node lifecycle timestamps."""

    def __init__(self, core_api: client.CoreV1Api, node_name: str, pod_namespace: str = "default"):
        self.core_api = core_api
        self.node_name = node_name
        self.pod_namespace = pod_namespace

    def clear_cache(self) -> None:
        pass

    def __str__(self) -> str:
        return NAME

    def name(self) -> str:
        return NAME

    def find_pod(self):
        """Return the first pod in the source namespace scheduled to this node.

        Raises:
            ObjectNotFoundError: If no pod is scheduled to the node.
        """
        pods = self.core_api.list_namespaced_pod(
            self.pod_namespace,
            field_selector=f"spec.nodeName={self.node_name}",
        )
        if not pods.items:
            raise ObjectNotFoundError(f"unable to find pods on node {self.node_name} in namespace {self.pod_namespace}")
        return pods.items[0]

    def find_node(self):
        """Return this source's node.

        Raises:
            ObjectNotFoundError: If the API reports the node does not exist.
        """
        try:
            return self.core_api.read_node(self.node_name)
        except ApiException as e:
            if e.status == 404:
                raise ObjectNotFoundError(f"unable to find node {self.node_name}") from e
            raise

    def find_pod_creation_time(self) -> FindFunc:
        def _find(_source, _log) -> List[str]:
            pod = self.find_pod()
            return [_unix(pod.metadata.creation_timestamp)]

        return _find

    def find_pod_ready_time(self) -> FindFunc:
        def _find(_source, _log) -> List[str]:
            pod = self.find_pod()
            condition = _find_condition(pod.status.conditions, "Ready", "pod")
            return [_unix(condition.last_transition_time)]

        return _find

    def find_pod_scheduled_time(self) -> FindFunc:
        def _find(_source, _log) -> List[str]:
            pod = self.find_pod()
            condition = _find_condition(pod.status.conditions, "PodScheduled", "pod")
            return [_unix(condition.last_transition_time)]

        return _find

    def find_node_ready_time(self) -> FindFunc:
        """Match every Ready=True condition reported by the node."""

        def _find(_source, _log) -> List[str]:
            node = self.find_node()
            matches = [
                _unix(condition.last_transition_time)
                for condition in node.status.conditions or []
                if condition.type == "Ready" and condition.status == "True"
            ]
            if not matches:
                raise ConditionNotFoundError(f"unable to find node {self.node_name} with Ready condition")
            return matches

        return _find

    def find_node_register_time(self) -> FindFunc:
        def _find(_source, _log) -> List[str]:
            node = self.find_node()
            return [_unix(node.metadata.creation_timestamp)]

        return _find

    def parse_time_for(self, unix_sec: str) -> datetime:
        """Parse a Unix timestamp (seconds since the epoch) into a UTC datetime."""
        try:
            return datetime.fromtimestamp(int(unix_sec), tz=timezone.utc)
        except (TypeError, ValueError, OverflowError) as e:
            raise TimestampParseError(f'unable to parse time for K8s event from "{unix_sec}"') from e

    def find(self, event) -> List[FindResult]:
        """Query the API with the event's match function.

        Unlike log sources, a value that fails to parse is attached to its own
        result and the rest of the batch is kept. Results keep API order.
        """
        match_fn = require_match_fn(event)
        k8s_events = match_fn(self, None)
        results = []
        for k8s_event in k8s_events:
            comment = event.comment_fn(k8s_event) if event.comment_fn else ""
            try:
                event_time = self.parse_time_for(k8s_event)
                err = None
            except TimestampParseError as e:
                logger.warning(f"{event.name}: {e}")
                event_time, err = None, e
            results.append(FindResult(line=k8s_event, timestamp=event_time, comment=comment, err=err))
        return select_matches(results, event.match_selector)
