from __future__ import annotations

import datetime
from abc import abstractmethod
from enum import Enum
from typing import Optional, Generic, TypeVar, Dict

import requests

from escluster.exceptions.cluster_exceptions import BadResponseException
from escluster.http.server_node import ServerNode


class ClusterCommandResponseType(Enum):
    OBJECT = "Object"
    RAW = "Raw"

    def __str__(self):
        return self.value


_T_Result = TypeVar("_T_Result")


class ClusterCommand(Generic[_T_Result]):
    def __init__(self):
        self._response_type = ClusterCommandResponseType.OBJECT

        self.result: Optional[_T_Result] = None
        self.status_code: Optional[int] = None
        self.timeout: Optional[datetime.timedelta] = None
        self.selected_node: Optional[ServerNode] = None
        self.failed_nodes: Dict[ServerNode, Exception] = {}

    @abstractmethod
    def create_request(self, node: ServerNode) -> requests.Request:
        pass

    @property
    def response_type(self) -> ClusterCommandResponseType:
        return self._response_type

    @abstractmethod
    def set_response(self, response: Optional[str]) -> None:
        if self._response_type == ClusterCommandResponseType.RAW:
            self._throw_invalid_response()
        raise RuntimeError(
            f"{self.response_type.name} command must override the set_response method which "
            f"expects response with the following type {self.response_type}"
        )

    def set_response_raw(self, response: requests.Response, stream: Optional[bytes]) -> None:
        raise RuntimeError(
            f"When {self.response_type} is set to Raw then please override this method to handle the response "
        )

    def send(
        self, session: requests.Session, request: requests.Request, timeout: Optional[float] = None
    ) -> requests.Response:
        return session.request(
            request.method,
            url=request.url,
            params=request.params,
            data=request.data,
            headers=request.headers,
            timeout=timeout,
        )

    def is_failed_with_node(self, node: ServerNode) -> bool:
        return bool(self.failed_nodes) and node in self.failed_nodes

    def process_response(self, response: requests.Response) -> None:
        # every command reads a body, an empty one (204 included) is handed over as None
        try:
            content = response.content or None
            if self.response_type == ClusterCommandResponseType.OBJECT:
                self.set_response(content.decode("utf-8") if content is not None else None)
            else:
                self.set_response_raw(response, content)
        finally:
            response.close()

    @staticmethod
    def _throw_invalid_response(cause: Optional[BaseException] = None) -> None:
        raise BadResponseException(f"Response is invalid{f': {cause.args[0]}' if cause else ''}")
