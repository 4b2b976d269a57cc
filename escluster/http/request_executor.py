from __future__ import annotations

import datetime
import logging
import os
from threading import Lock
from typing import TYPE_CHECKING, List, Dict, Optional, Iterable, Union

import requests

from escluster import constants
from escluster.exceptions.exception_dispatcher import ExceptionDispatcher
from escluster.exceptions.exceptions import ConnectivityException, InvalidOperationException
from escluster.http.cluster_command import ClusterCommand
from escluster.http.server_node import ServerNode, TransportAddress

if TYPE_CHECKING:
    from escluster.settings import Settings


class RequestExecutor:
    """
    Sends administrative commands to the seed nodes of a cluster.

    Seed nodes are tried in the order they were added. A node that cannot be reached is
    recorded on the command and the next seed is tried; a node that answers with an
    error status fails the command right away. A command is never sent twice to the same node.
    """

    CLIENT_VERSION = constants.Clients.CLIENT_VERSION
    DEFAULT_TIMEOUT = datetime.timedelta(seconds=5)
    logger = logging.getLogger("request_executor")

    def __init__(
        self,
        client_name: str,
        settings: Settings,
        default_headers: Optional[Dict[str, str]] = None,
    ):
        self.__client_name = client_name
        self.__settings = settings
        self.__default_timeout: datetime.timedelta = settings.get_as_timedelta(
            constants.Settings.PING_TIMEOUT, RequestExecutor.DEFAULT_TIMEOUT
        )
        self.__default_headers = dict(default_headers) if default_headers else {}
        self.__nodes: List[ServerNode] = []
        self.__http_session: Optional[requests.Session] = None
        self.__synchronized_lock = Lock()

        self.number_of_server_requests = 0
        self._disposed = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self) -> None:
        if self._disposed:
            return

        self._disposed = True
        if self.__http_session is not None:
            self.__http_session.close()
            self.__http_session = None

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def nodes(self) -> List[ServerNode]:
        return list(self.__nodes)

    @property
    def default_timeout(self) -> datetime.timedelta:
        return self.__default_timeout

    @property
    def http_session(self) -> requests.Session:
        http_session = self.__http_session
        if http_session:
            return http_session
        with self.__synchronized_lock:
            if self.__http_session is None:
                self.__http_session = self.__create_http_session()
            return self.__http_session

    def __create_http_session(self) -> requests.Session:
        session = requests.Session()
        # no proxies, netrc or CA bundles from the environment
        session.trust_env = not self.__settings.get_as_bool(constants.Settings.IGNORE_SYSTEM_PROPERTIES, False)
        return session

    def add_nodes(self, addresses: Iterable[Union[str, TransportAddress]]) -> None:
        if self._disposed:
            raise InvalidOperationException("The request executor was already closed")

        cluster_name = self.__settings.get(constants.Settings.CLUSTER_NAME)
        for address in addresses:
            node = ServerNode(TransportAddress.parse(address), cluster_name)
            if node in self.__nodes:
                continue
            self.__nodes.append(node)

    def execute_command(self, command: ClusterCommand) -> None:
        if self._disposed:
            raise InvalidOperationException("The request executor was already closed")

        if not self.__nodes:
            raise ConnectivityException("No seed addresses were configured for this client")

        for node in self.__nodes:
            if command.is_failed_with_node(node):
                continue

            response = self.__send_request_to_server(node, command)
            if response is None:
                continue

            command.selected_node = node
            command.status_code = response.status_code
            try:
                if response.status_code >= 400:
                    raise ExceptionDispatcher.from_response_body(
                        self.__try_get_response_of_error(response), response.status_code, response.url
                    )
                command.process_response(response)
            finally:
                response.close()
            return

        self.__throw_failed_to_contact_all_nodes(command)

    def __send_request_to_server(self, node: ServerNode, command: ClusterCommand) -> Optional[requests.Response]:
        request = command.create_request(node)
        self.__set_request_headers(request)

        timeout = command.timeout if command.timeout else self.__default_timeout
        self.number_of_server_requests += 1
        self.logger.debug(f"[{self.__client_name}] {request.method} {request.url}")
        try:
            return command.send(self.http_session, request, timeout.total_seconds())
        except (requests.ConnectionError, requests.Timeout) as e:
            self.logger.info(f"[{self.__client_name}] failed to reach node [{node}]", exc_info=e)
            command.failed_nodes[node] = e
            return None

    def __set_request_headers(self, request: requests.Request) -> None:
        if request.headers is None:
            request.headers = {}
        for name, value in self.__default_headers.items():
            request.headers.setdefault(name, value)

        request.headers.setdefault(constants.Headers.ACCEPT, "application/json")
        request.headers.setdefault(constants.Headers.OPAQUE_ID, self.__client_name)
        request.headers.setdefault(constants.Headers.USER_AGENT, f"escluster/{RequestExecutor.CLIENT_VERSION}")

    @staticmethod
    def __try_get_response_of_error(response: requests.Response) -> str:
        try:
            return response.content.decode("utf-8")
        except Exception as e:
            return f"Could not read request: {e.args[0]}"

    def __throw_failed_to_contact_all_nodes(self, command: ClusterCommand) -> None:
        message = (
            f"Tried to send {command.__class__.__name__} to all configured seed nodes, "
            f"none of them responded within {self.__default_timeout}.{os.linesep}Nodes: "
        )

        for node in self.__nodes:
            exception = command.failed_nodes.get(node)
            message += f"{os.linesep}[Address: {node}, Exception: {exception if exception else 'No exception'}]"

        raise ConnectivityException(message, {str(node): e for node, e in command.failed_nodes.items()})
