from __future__ import annotations

import ipaddress
import re
from typing import Union, Optional

_ADDRESS_RE = re.compile(r"^(?:(?P<hostname>[^/\s]*)/)?(?P<host>\[[0-9a-fA-F:.]+\]|[^:\s/\[\]]+):(?P<port>\d{1,5})$")


class TransportAddress:
    """host:port endpoint as supplied by the caller, e.g. a seed address."""

    def __init__(self, host: str, port: int):
        if not host:
            raise ValueError("Host cannot be None or empty")
        if port is None or not 0 < int(port) < 65536:
            raise ValueError(f"Port must be in range 1-65535, got {port}")
        self.host = host.strip("[]")
        self.port = int(port)

    @classmethod
    def parse(cls, value: Union[str, TransportAddress]) -> TransportAddress:
        if isinstance(value, TransportAddress):
            return value
        match = _ADDRESS_RE.match(value.strip()) if isinstance(value, str) else None
        if match is None:
            raise ValueError(f"Address [{value}] is not in the host:port form")
        return cls(match.group("host"), int(match.group("port")))

    @property
    def url(self) -> str:
        host = f"[{self.host}]" if ":" in self.host else self.host
        return f"http://{host}:{self.port}"

    def __eq__(self, other):
        return isinstance(other, TransportAddress) and (self.host, self.port) == (other.host, other.port)

    def __hash__(self):
        return hash((self.host, self.port))

    def __str__(self):
        host = f"[{self.host}]" if ":" in self.host else self.host
        return f"{host}:{self.port}"

    def __repr__(self):
        return f"{self.__class__.__name__}({self.host!r}, {self.port})"


class InetSocketAddress(TransportAddress):
    """Resolved ip:port address, as published by a node."""

    def __init__(self, host: str, port: int, hostname: Optional[str] = None):
        super().__init__(host, port)
        try:
            ipaddress.ip_address(self.host)
        except ValueError:
            raise ValueError(f"[{host}] is not a resolved ip address")
        self.hostname = hostname or None

    @classmethod
    def parse(cls, value: str) -> InetSocketAddress:
        match = _ADDRESS_RE.match(value.strip()) if isinstance(value, str) else None
        if match is None:
            raise ValueError(f"Address [{value}] is not a socket address")
        return cls(match.group("host"), int(match.group("port")), match.group("hostname"))


class ServerNode:
    def __init__(self, address: TransportAddress, cluster_name: Optional[str] = None):
        self.address = address
        self.cluster_name = cluster_name

    @property
    def url(self) -> str:
        return self.address.url

    def __eq__(self, other):
        return isinstance(other, ServerNode) and self.address == other.address

    def __hash__(self):
        return hash(self.address)

    def __str__(self):
        return str(self.address)
