from __future__ import annotations

from abc import abstractmethod
from typing import Generic, TypeVar

from escluster.http.cluster_command import ClusterCommand

T = TypeVar("T")


class ServerOperation(Generic[T]):
    @abstractmethod
    def get_command(self) -> ClusterCommand[T]:
        raise NotImplementedError()
