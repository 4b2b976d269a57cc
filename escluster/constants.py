class Settings:
    NAME = "name"
    CLUSTER_NAME = "cluster.name"
    PATH_HOME = "path.home"
    NODE_MODE = "node.mode"
    IGNORE_SYSTEM_PROPERTIES = "config.ignore_system_properties"
    IGNORE_CLUSTER_NAME = "client.transport.ignore_cluster_name"
    PING_TIMEOUT = "client.transport.ping_timeout"

    ENV_PREFIX = "ESCLUSTER_"

    class NodeMode:
        NETWORK = "network"


class Roles:
    NODE_ROLES = "node.roles"
    NODE_DATA = "node.data"
    NODE_MASTER = "node.master"
    NODE_CLIENT = "node.client"

    DATA = "data"
    DATA_PREFIX = "data_"
    MASTER = "master"


class Breakers:
    FIELDDATA = "fielddata"


class Headers:
    ACCEPT = "Accept"
    USER_AGENT = "User-Agent"
    OPAQUE_ID = "X-Opaque-Id"


class Clients:
    TRANSPORT_CLIENT_PREFIX = "transport_client_"
    EXTERNAL_CLUSTER_PREFIX = "external_"
    CLIENT_VERSION = "0.1.0"


class Environment:
    TESTS_CLUSTER = "TESTS_CLUSTER"
