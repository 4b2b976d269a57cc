from __future__ import annotations

from typing import Dict, List, Mapping, Any, TYPE_CHECKING

if TYPE_CHECKING:
    from escluster.http.topology import NodeInfo
    from escluster.settings import Settings


class Plugin:
    """
    Client extension.

    A plugin is instantiated once per client with the client's final settings. It can
    contribute default settings, headers sent with every request, extra node info
    metrics and a decoder for the sections those metrics add to each node.
    """

    name: str = None

    def __init__(self, settings: Settings):
        self.settings = settings

    @classmethod
    def additional_settings(cls) -> Mapping[str, Any]:
        return {}

    def request_headers(self) -> Dict[str, str]:
        return {}

    def node_info_metrics(self) -> List[str]:
        return []

    def decode_node_info(self, node: NodeInfo, json_dict: Mapping[str, Any]) -> None:
        pass

    def close(self) -> None:
        pass

    @classmethod
    def plugin_name(cls) -> str:
        return cls.name or cls.__name__
