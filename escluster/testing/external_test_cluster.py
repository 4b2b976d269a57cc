from __future__ import annotations

import logging
import os
import shutil
import tempfile
from typing import AbstractSet, Callable, Iterable, List, Mapping, Optional, Tuple, Type, Union

from escluster import constants
from escluster.client.plugins import Plugin
from escluster.client.transport_client import AdministrativeClient, TransportClient
from escluster.exceptions.exceptions import ConnectivityException, InvalidOperationException
from escluster.http.server_node import InetSocketAddress, TransportAddress
from escluster.http.topology import NodesInfo
from escluster.settings import Settings
from escluster.testing.naming import ClientNameGenerator, default_name_generator
from escluster.testing.stats_checker import ensure_baseline_stats
from escluster.testing.test_cluster import TestCluster

ClientFactory = Callable[[Settings, List[Type[Plugin]], Tuple[TransportAddress, ...]], AdministrativeClient]


def _transport_client_factory(
    settings: Settings, plugins: List[Type[Plugin]], addresses: Tuple[TransportAddress, ...]
) -> AdministrativeClient:
    client = TransportClient(settings, plugins)
    try:
        client.add_transport_addresses(*addresses)
    except BaseException:
        client.close()
        raise
    return client


class ExternalTestCluster(TestCluster):
    """
    Cluster made of nodes that are already running somewhere else.

    The nodes are only connected to, never started, stopped or reconfigured. Topology and
    node roles are read once when the cluster is created and are not refreshed afterwards,
    so the counts go stale if nodes join, leave or change roles while tests run.
    """

    logger = logging.getLogger("external_test_cluster")

    EXTERNAL_CLUSTER_PREFIX = constants.Clients.EXTERNAL_CLUSTER_PREFIX

    def __init__(
        self,
        temp_dir: str,
        additional_settings: Optional[Mapping[str, object]],
        plugin_classes: Iterable[Type[Plugin]],
        *transport_addresses: Union[str, TransportAddress],
        name_generator: Optional[ClientNameGenerator] = None,
        client_factory: Optional[ClientFactory] = None,
        remove_temp_dir: bool = False,
    ):
        super().__init__(0)
        self.__temp_dir = temp_dir if remove_temp_dir else None
        try:
            self.__connect(
                temp_dir, additional_settings, plugin_classes, transport_addresses, name_generator, client_factory
            )
        except BaseException:
            self.__remove_temp_dir()
            raise

        self.__closed = False
        self.logger.info(f"Setup ExternalTestCluster [{self.__cluster_name}] made of [{self.size()}] nodes")

    def __connect(
        self,
        temp_dir: str,
        additional_settings: Optional[Mapping[str, object]],
        plugin_classes: Iterable[Type[Plugin]],
        transport_addresses: Tuple[Union[str, TransportAddress], ...],
        name_generator: Optional[ClientNameGenerator],
        client_factory: Optional[ClientFactory],
    ) -> None:
        name_generator = name_generator or default_name_generator()
        client_factory = client_factory or _transport_client_factory

        client_settings = (
            Settings.builder()
            .put(additional_settings or {})
            .put(
                constants.Settings.NAME,
                name_generator.next_name(
                    constants.Clients.TRANSPORT_CLIENT_PREFIX + ExternalTestCluster.EXTERNAL_CLUSTER_PREFIX
                ),
            )
            .put(constants.Settings.IGNORE_SYSTEM_PROPERTIES, True)
            .put(constants.Settings.IGNORE_CLUSTER_NAME, True)
            .put(constants.Settings.PATH_HOME, temp_dir)
            .put(constants.Settings.NODE_MODE, constants.Settings.NodeMode.NETWORK)
            .build()
        )

        addresses = tuple(TransportAddress.parse(address) for address in transport_addresses)
        client = client_factory(client_settings, list(plugin_classes), addresses)

        try:
            nodes_info = client.describe_nodes(settings=True, http=True)
            self.__cluster_name = nodes_info.cluster_name
            self.__http_addresses, self.__num_data_nodes, self.__num_master_and_data_nodes = self.__classify(
                nodes_info
            )
            self.__client = client
        except BaseException:
            client.close()
            raise

    def __remove_temp_dir(self) -> None:
        if self.__temp_dir is not None:
            shutil.rmtree(self.__temp_dir, ignore_errors=True)
            self.__temp_dir = None

    @staticmethod
    def __classify(nodes_info: NodesInfo) -> Tuple[Tuple[InetSocketAddress, ...], int, int]:
        http_addresses = []
        data_nodes = 0
        master_and_data_nodes = 0
        for node in nodes_info.nodes:
            if node.http_address is None:
                raise ConnectivityException(f"Node [{node}] did not publish an http address")
            http_addresses.append(node.http_address)
            if node.is_data:
                data_nodes += 1
                master_and_data_nodes += 1
            elif node.is_master_eligible:
                master_and_data_nodes += 1
        return tuple(http_addresses), data_nodes, master_and_data_nodes

    @classmethod
    def from_environment(
        cls,
        temp_dir: Optional[str] = None,
        plugin_classes: Iterable[Type[Plugin]] = (),
        environ: Optional[Mapping[str, str]] = None,
        **kwargs,
    ) -> ExternalTestCluster:
        environ = os.environ if environ is None else environ
        seeds = [seed.strip() for seed in environ.get(constants.Environment.TESTS_CLUSTER, "").split(",")]
        seeds = [seed for seed in seeds if seed]
        if not seeds:
            raise InvalidOperationException(
                f"Set {constants.Environment.TESTS_CLUSTER} to a comma separated list of host:port seed addresses"
            )

        # the client itself is hermetic, overrides are read here and passed on explicitly
        additional_settings = Settings.from_environment(environ)
        # a scratch directory created here belongs to the cluster and goes away on close
        return cls(
            temp_dir or tempfile.mkdtemp(prefix="escluster_"),
            additional_settings,
            plugin_classes,
            *seeds,
            remove_temp_dir=temp_dir is None,
            **kwargs,
        )

    def after_test(self) -> None:
        pass

    def client(self) -> AdministrativeClient:
        return self.__client

    def size(self) -> int:
        return len(self.__http_addresses)

    def num_data_nodes(self) -> int:
        return self.__num_data_nodes

    def num_data_and_master_nodes(self) -> int:
        return self.__num_master_and_data_nodes

    def http_addresses(self) -> Tuple[InetSocketAddress, ...]:
        return self.__http_addresses

    def close(self) -> None:
        if self.__closed:
            return
        self.__closed = True
        try:
            self.__client.close()
        finally:
            self.__remove_temp_dir()

    def ensure_estimated_stats(self) -> None:
        ensure_baseline_stats(self.__client, self.size())

    def get_clients(self) -> AbstractSet[AdministrativeClient]:
        return frozenset([self.__client])

    def get_cluster_name(self) -> str:
        return self.__cluster_name
