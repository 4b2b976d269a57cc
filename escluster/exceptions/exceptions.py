from typing import Optional, Dict

from escluster.exceptions.cluster_exceptions import ClusterException


class InvalidOperationException(Exception):
    pass


class NotSupportedException(Exception):
    pass


class ConnectivityException(ClusterException):
    def __init__(self, message: str = None, failed_nodes: Optional[Dict[str, Exception]] = None):
        super(ConnectivityException, self).__init__(message)
        self.failed_nodes = failed_nodes or {}


class InvariantViolation(AssertionError):
    def __init__(self, message: str, node: Optional[str] = None, metric: Optional[str] = None, actual: int = None):
        super(InvariantViolation, self).__init__(message)
        self.node = node
        self.metric = metric
        self.actual = actual
