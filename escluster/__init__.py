from escluster.client.plugins import Plugin
from escluster.client.transport_client import AdministrativeClient, TransportClient
from escluster.exceptions.cluster_exceptions import (
    ClusterException,
    BadResponseException,
    ClusterNameMismatchException,
    IndexNotFoundException,
    SecurityException,
    CircuitBreakingException,
)
from escluster.exceptions.exception_dispatcher import ExceptionDispatcher
from escluster.exceptions.exceptions import (
    ConnectivityException,
    InvariantViolation,
    InvalidOperationException,
    NotSupportedException,
)
from escluster.http.cluster_command import ClusterCommand, ClusterCommandResponseType
from escluster.http.request_executor import RequestExecutor
from escluster.http.server_node import InetSocketAddress, ServerNode, TransportAddress
from escluster.http.topology import DiscoveryNode, NodeInfo, NodesInfo
from escluster.serverwide.misc import (
    AllCircuitBreakerStats,
    BreakerStats,
    IndicesMemoryStats,
    NodeStats,
    NodesStats,
)
from escluster.serverwide.operations.common import ServerOperation
from escluster.serverwide.operations.nodes import NodesInfoOperation, NodesStatsOperation
from escluster.serverwide.server_operation_executor import ServerOperationExecutor
from escluster.settings import Settings, SettingsBuilder
from escluster.testing.external_test_cluster import ExternalTestCluster
from escluster.testing.naming import ClientNameGenerator, CounterClientNameGenerator, default_name_generator
from escluster.testing.stats_checker import NodeStatsReport, ensure_baseline_stats
from escluster.testing.test_cluster import TestCluster
