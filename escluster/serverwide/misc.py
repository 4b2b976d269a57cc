from __future__ import annotations

from typing import Dict, List, Optional, Mapping, Any


class BreakerStats:
    def __init__(self, name: str, estimated: int = 0, limit: int = 0, tripped: int = 0, overhead: float = 1.0):
        self.name = name
        self.estimated = estimated
        self.limit = limit
        self.tripped = tripped
        self.overhead = overhead

    @classmethod
    def from_json(cls, name: str, json_dict: Mapping[str, Any]) -> BreakerStats:
        return cls(
            name,
            int(json_dict.get("estimated_size_in_bytes", 0)),
            int(json_dict.get("limit_size_in_bytes", 0)),
            int(json_dict.get("tripped", 0)),
            float(json_dict.get("overhead", 1.0)),
        )


class AllCircuitBreakerStats:
    def __init__(self, breakers: Optional[Dict[str, BreakerStats]] = None):
        self.breakers = breakers or {}

    def get_stats(self, name: str) -> BreakerStats:
        # a breaker the node does not report has nothing reserved
        return self.breakers.get(name) or BreakerStats(name)

    @classmethod
    def from_json(cls, json_dict: Mapping[str, Any]) -> AllCircuitBreakerStats:
        return cls({name: BreakerStats.from_json(name, stats) for name, stats in json_dict.items()})


class IndicesMemoryStats:
    def __init__(
        self,
        field_data_memory_in_bytes: int = 0,
        query_cache_memory_in_bytes: int = 0,
        bitset_memory_in_bytes: int = 0,
    ):
        self.field_data_memory_in_bytes = field_data_memory_in_bytes
        self.query_cache_memory_in_bytes = query_cache_memory_in_bytes
        self.bitset_memory_in_bytes = bitset_memory_in_bytes

    @classmethod
    def from_json(cls, json_dict: Mapping[str, Any]) -> IndicesMemoryStats:
        return cls(
            int((json_dict.get("fielddata") or {}).get("memory_size_in_bytes", 0)),
            int((json_dict.get("query_cache") or {}).get("memory_size_in_bytes", 0)),
            int((json_dict.get("segments") or {}).get("fixed_bit_set_memory_in_bytes", 0)),
        )


class NodeStats:
    def __init__(
        self,
        node_id: str,
        name: Optional[str] = None,
        breaker: Optional[AllCircuitBreakerStats] = None,
        indices: Optional[IndicesMemoryStats] = None,
    ):
        self.node_id = node_id
        self.name = name
        self.breaker = breaker if breaker is not None else AllCircuitBreakerStats()
        self.indices = indices if indices is not None else IndicesMemoryStats()

    @property
    def node(self) -> str:
        return f"{{{self.name}}}{{{self.node_id}}}" if self.name else self.node_id

    @classmethod
    def from_json(cls, node_id: str, json_dict: Mapping[str, Any]) -> NodeStats:
        return cls(
            node_id,
            json_dict.get("name"),
            AllCircuitBreakerStats.from_json(json_dict.get("breakers") or {}),
            IndicesMemoryStats.from_json(json_dict.get("indices") or {}),
        )


class NodesStats:
    def __init__(self, cluster_name: Optional[str], nodes: List[NodeStats]):
        self.cluster_name = cluster_name
        self.nodes = nodes
