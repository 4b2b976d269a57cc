from __future__ import annotations

import logging
import os
from abc import abstractmethod
from typing import Iterable, List, Optional, Type, Union

from escluster import constants
from escluster.client.plugins import Plugin
from escluster.exceptions.cluster_exceptions import ClusterNameMismatchException
from escluster.exceptions.exceptions import NotSupportedException
from escluster.http.request_executor import RequestExecutor
from escluster.http.server_node import TransportAddress
from escluster.http.topology import NodesInfo
from escluster.serverwide.misc import NodesStats
from escluster.serverwide.operations.nodes import NodesInfoOperation, NodesStatsOperation
from escluster.serverwide.server_operation_executor import ServerOperationExecutor
from escluster.settings import Settings


class AdministrativeClient:
    @abstractmethod
    def describe_nodes(self, settings: bool = True, http: bool = True) -> NodesInfo:
        pass

    @abstractmethod
    def describe_node_stats(self, breaker: bool = True, indices: bool = True) -> NodesStats:
        pass

    @abstractmethod
    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class _ClientRecordFilter(logging.Filter):
    def __init__(self, client_name: str):
        super().__init__()
        self.client_name = client_name

    def filter(self, record: logging.LogRecord) -> bool:
        return getattr(record, "client_name", None) == self.client_name


class TransportClient(AdministrativeClient):
    DEFAULT_NAME = "transport_client"
    logger = logging.getLogger("transport_client")
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    def __init__(self, settings: Optional[Settings] = None, plugins: Iterable[Type[Plugin]] = ()):
        plugin_classes = list(plugins)
        self.__settings = self.__prepare_settings(settings or Settings.EMPTY, plugin_classes)

        mode = self.__settings.get(constants.Settings.NODE_MODE, constants.Settings.NodeMode.NETWORK)
        if mode != constants.Settings.NodeMode.NETWORK:
            raise NotSupportedException(
                f"Unsupported {constants.Settings.NODE_MODE} [{mode}], "
                f"only [{constants.Settings.NodeMode.NETWORK}] clients are available"
            )

        self.__name = self.__settings.get(constants.Settings.NAME, TransportClient.DEFAULT_NAME)
        self._logger = logging.LoggerAdapter(TransportClient.logger, {"client_name": self.__name})
        self.__log_handler: Optional[logging.Handler] = None
        self.__plugins: List[Plugin] = []
        self._disposed = False

        try:
            self.__plugins = [plugin_class(self.__settings) for plugin_class in plugin_classes]
            self.__attach_log_file()

            headers = {}
            for plugin in self.__plugins:
                headers.update(plugin.request_headers())
            self.__request_executor = RequestExecutor(self.__name, self.__settings, headers)
            self.__admin = ServerOperationExecutor(self.__request_executor)
        except BaseException:
            self.__close_plugins_and_log()
            raise

        self._logger.debug(
            f"Created client [{self.__name}] with plugins {[plugin.plugin_name() for plugin in self.__plugins]}"
        )

    @staticmethod
    def __prepare_settings(settings: Settings, plugin_classes: List[Type[Plugin]]) -> Settings:
        builder = Settings.builder()
        if not settings.get_as_bool(constants.Settings.IGNORE_SYSTEM_PROPERTIES, False):
            builder.put(Settings.from_environment())
        for plugin_class in plugin_classes:
            builder.put(plugin_class.additional_settings())
        return builder.put(settings).build()

    def __attach_log_file(self) -> None:
        home = self.__settings.get(constants.Settings.PATH_HOME)
        if not home:
            return
        logs_dir = os.path.join(home, "logs")
        os.makedirs(logs_dir, exist_ok=True)
        handler = logging.FileHandler(os.path.join(logs_dir, f"{self.__name}.log"))
        handler.setFormatter(logging.Formatter(TransportClient.LOG_FORMAT))
        handler.addFilter(_ClientRecordFilter(self.__name))
        TransportClient.logger.addHandler(handler)
        self.__log_handler = handler

    @property
    def name(self) -> str:
        return self.__name

    @property
    def settings(self) -> Settings:
        return self.__settings

    @property
    def plugins(self) -> List[Plugin]:
        return list(self.__plugins)

    @property
    def admin(self) -> ServerOperationExecutor:
        return self.__admin

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def transport_addresses(self) -> List[TransportAddress]:
        return [node.address for node in self.__request_executor.nodes]

    def add_transport_addresses(self, *addresses: Union[str, TransportAddress]) -> TransportClient:
        self.__request_executor.add_nodes(addresses)
        self._logger.debug(f"[{self.__name}] added transport addresses {[str(address) for address in addresses]}")
        return self

    def describe_nodes(self, settings: bool = True, http: bool = True) -> NodesInfo:
        additional_metrics = []
        for plugin in self.__plugins:
            additional_metrics.extend(plugin.node_info_metrics())

        nodes_info = self.__admin.send(NodesInfoOperation(settings, http, additional_metrics))
        self.__verify_cluster_name(nodes_info.cluster_name)

        for node in nodes_info.nodes:
            for plugin in self.__plugins:
                plugin.decode_node_info(node, node.source)

        self._logger.debug(
            f"[{self.__name}] cluster [{nodes_info.cluster_name}] reported {len(nodes_info.nodes)} nodes"
        )
        return nodes_info

    def describe_node_stats(self, breaker: bool = True, indices: bool = True) -> NodesStats:
        nodes_stats = self.__admin.send(NodesStatsOperation(breaker, indices))
        self.__verify_cluster_name(nodes_stats.cluster_name)
        return nodes_stats

    def __verify_cluster_name(self, reported: Optional[str]) -> None:
        if self.__settings.get_as_bool(constants.Settings.IGNORE_CLUSTER_NAME, False):
            return
        expected = self.__settings.get(constants.Settings.CLUSTER_NAME)
        if expected is not None and reported is not None and expected != reported:
            raise ClusterNameMismatchException(expected, reported)

    def close(self) -> None:
        if self._disposed:
            return

        self._disposed = True
        self._logger.debug(f"Closing client [{self.__name}]")
        try:
            self.__admin.close()
        finally:
            self.__close_plugins_and_log()

    def __close_plugins_and_log(self) -> None:
        try:
            for plugin in self.__plugins:
                plugin.close()
        finally:
            if self.__log_handler is not None:
                TransportClient.logger.removeHandler(self.__log_handler)
                self.__log_handler.close()
                self.__log_handler = None
