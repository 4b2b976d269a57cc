from __future__ import annotations

from typing import Dict, List, Optional, Mapping, Any

from escluster import constants
from escluster.exceptions.exceptions import ConnectivityException
from escluster.http.server_node import InetSocketAddress
from escluster.settings import Settings


class DiscoveryNode:
    @staticmethod
    def __roles(settings: Settings) -> Optional[List[str]]:
        return settings.get_as_list(constants.Roles.NODE_ROLES)

    @staticmethod
    def is_data_node(settings: Settings) -> bool:
        roles = DiscoveryNode.__roles(settings)
        if roles is not None:
            return any(
                role == constants.Roles.DATA or role.startswith(constants.Roles.DATA_PREFIX) for role in roles
            )
        if settings.get_as_bool(constants.Roles.NODE_CLIENT, False):
            return False
        return settings.get_as_bool(constants.Roles.NODE_DATA, True)

    @staticmethod
    def is_master_node(settings: Settings) -> bool:
        roles = DiscoveryNode.__roles(settings)
        if roles is not None:
            return constants.Roles.MASTER in roles
        if settings.get_as_bool(constants.Roles.NODE_CLIENT, False):
            return False
        return settings.get_as_bool(constants.Roles.NODE_MASTER, True)


class NodeInfo:
    def __init__(
        self,
        node_id: str,
        name: Optional[str] = None,
        settings: Optional[Settings] = None,
        http_address: Optional[InetSocketAddress] = None,
        extensions: Optional[Dict[str, Any]] = None,
    ):
        self.node_id = node_id
        self.name = name
        self.settings = settings if settings is not None else Settings.EMPTY
        self.http_address = http_address
        self.extensions = extensions if extensions is not None else {}
        self.source: Mapping[str, Any] = {}

    @property
    def is_data(self) -> bool:
        return DiscoveryNode.is_data_node(self.settings)

    @property
    def is_master_eligible(self) -> bool:
        return DiscoveryNode.is_master_node(self.settings)

    def __str__(self):
        return f"{{{self.name}}}{{{self.node_id}}}" if self.name else self.node_id

    @classmethod
    def from_json(cls, node_id: str, json_dict: Mapping[str, Any]) -> NodeInfo:
        settings = Settings(NodeInfo.__flatten(json_dict.get("settings") or {}))
        http_address = None
        http = json_dict.get("http")
        if http is not None:
            http_address = NodeInfo.parse_publish_address(node_id, http.get("publish_address"))
        node_info = cls(node_id, json_dict.get("name"), settings, http_address)
        node_info.source = json_dict
        return node_info

    @staticmethod
    def parse_publish_address(node_id: str, publish_address: Any) -> InetSocketAddress:
        if not isinstance(publish_address, str):
            raise ConnectivityException(
                f"Node [{node_id}] published http address [{publish_address}] which is not a socket address"
            )
        try:
            return InetSocketAddress.parse(publish_address)
        except ValueError as e:
            raise ConnectivityException(
                f"Node [{node_id}] published http address [{publish_address}] which is not a socket address",
                {node_id: e},
            )

    @staticmethod
    def __flatten(values: Mapping[str, Any], prefix: str = "") -> Dict[str, str]:
        # flat_settings=true already returns dotted keys, nested maps only come from older servers
        flat = {}
        for key, value in values.items():
            if isinstance(value, Mapping):
                flat.update(NodeInfo.__flatten(value, f"{prefix}{key}."))
            elif isinstance(value, (list, tuple)):
                flat[f"{prefix}{key}"] = ",".join(map(str, value))
            elif isinstance(value, bool):
                flat[f"{prefix}{key}"] = "true" if value else "false"
            else:
                flat[f"{prefix}{key}"] = str(value)
        return flat


class NodesInfo:
    def __init__(self, cluster_name: str, nodes: List[NodeInfo]):
        self.cluster_name = cluster_name
        self.nodes = nodes

    @classmethod
    def from_json(cls, json_dict: Mapping[str, Any]) -> NodesInfo:
        nodes = [NodeInfo.from_json(node_id, node) for node_id, node in (json_dict.get("nodes") or {}).items()]
        return cls(json_dict.get("cluster_name"), nodes)
