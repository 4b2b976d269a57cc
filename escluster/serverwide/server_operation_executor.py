from __future__ import annotations

from typing import TypeVar

from escluster.exceptions.cluster_exceptions import BadResponseException
from escluster.http.request_executor import RequestExecutor
from escluster.serverwide.operations.common import ServerOperation

_T_OperationResult = TypeVar("_T_OperationResult")


class ServerOperationExecutor:
    def __init__(self, request_executor: RequestExecutor):
        if request_executor is None:
            raise ValueError("Request Executor cannot be None")
        self.__request_executor = request_executor

    @property
    def request_executor(self) -> RequestExecutor:
        return self.__request_executor

    def send(self, operation: ServerOperation[_T_OperationResult]) -> _T_OperationResult:
        command = operation.get_command()
        self.__request_executor.execute_command(command)
        if command.result is None:
            raise BadResponseException(
                f"{command.__class__.__name__} got no result from node [{command.selected_node}]"
            )
        return command.result

    def close(self) -> None:
        self.__request_executor.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return
