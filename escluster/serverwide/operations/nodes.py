from __future__ import annotations

import io
import json
from typing import List, Optional, Iterable, TYPE_CHECKING

import ijson
import requests

from escluster.http.cluster_command import ClusterCommand, ClusterCommandResponseType
from escluster.http.topology import NodesInfo
from escluster.serverwide.misc import NodesStats, NodeStats
from escluster.serverwide.operations.common import ServerOperation

if TYPE_CHECKING:
    from escluster.http.server_node import ServerNode


def _metrics_path(metrics: List[str]) -> str:
    if not metrics:
        raise ValueError("At least one metric must be requested")
    return ",".join(metrics)


def _is_node_map(nodes: object) -> bool:
    return isinstance(nodes, dict) and all(isinstance(node, dict) for node in nodes.values())


class NodesInfoOperation(ServerOperation[NodesInfo]):
    def __init__(self, settings: bool = False, http: bool = False, additional_metrics: Iterable[str] = ()):
        metrics = []
        if settings:
            metrics.append("settings")
        if http:
            metrics.append("http")
        metrics.extend(metric for metric in additional_metrics if metric not in metrics)
        self.__metrics = metrics

    @property
    def metrics(self) -> List[str]:
        return list(self.__metrics)

    def get_command(self) -> ClusterCommand[NodesInfo]:
        return self.NodesInfoCommand(self.__metrics)

    class NodesInfoCommand(ClusterCommand[NodesInfo]):
        def __init__(self, metrics: List[str]):
            super().__init__()
            self.__metrics = metrics
            self.raw: Optional[dict] = None

        def create_request(self, node: ServerNode) -> requests.Request:
            return requests.Request(
                "GET", f"{node.url}/_nodes/{_metrics_path(self.__metrics)}", params={"flat_settings": "true"}
            )

        def set_response(self, response: Optional[str]) -> None:
            if response is None:
                self._throw_invalid_response()
            try:
                raw = json.loads(response)
            except ValueError as e:
                self._throw_invalid_response(e)
            if not isinstance(raw, dict) or not _is_node_map(raw.get("nodes", {})):
                self._throw_invalid_response()
            self.raw = raw
            self.result = NodesInfo.from_json(raw)


class NodesStatsOperation(ServerOperation[NodesStats]):
    def __init__(self, breaker: bool = False, indices: bool = False):
        metrics = []
        if breaker:
            metrics.append("breaker")
        if indices:
            metrics.append("indices")
        self.__metrics = metrics

    @property
    def metrics(self) -> List[str]:
        return list(self.__metrics)

    def get_command(self) -> ClusterCommand[NodesStats]:
        return self.NodesStatsCommand(self.__metrics)

    class NodesStatsCommand(ClusterCommand[NodesStats]):
        def __init__(self, metrics: List[str]):
            super().__init__()
            self.__metrics = metrics
            self._response_type = ClusterCommandResponseType.RAW

        def create_request(self, node: ServerNode) -> requests.Request:
            return requests.Request("GET", f"{node.url}/_nodes/stats/{_metrics_path(self.__metrics)}")

        def set_response(self, response: Optional[str]) -> None:
            self.set_response_raw(None, response.encode("utf-8") if response is not None else None)

        def set_response_raw(self, response: Optional[requests.Response], stream: Optional[bytes]) -> None:
            if not stream:
                self._throw_invalid_response()

            cluster_name = None
            nodes = None
            try:
                for key, value in ijson.kvitems(io.BytesIO(stream), ""):
                    if key == "cluster_name":
                        cluster_name = value
                    elif key == "nodes":
                        nodes = value
            except ijson.JSONError as e:
                self._throw_invalid_response(e)

            if not _is_node_map(nodes):
                self._throw_invalid_response()
            self.result = NodesStats(
                cluster_name, [NodeStats.from_json(node_id, node) for node_id, node in nodes.items()]
            )
