from escluster.http.server_node import InetSocketAddress, ServerNode, TransportAddress
from escluster.tests.test_base import TestBase


class TestTransportAddress(TestBase):
    def test_parse_host_and_port(self):
        address = TransportAddress.parse("localhost:9300")
        self.assertEqual("localhost", address.host)
        self.assertEqual(9300, address.port)
        self.assertEqual("http://localhost:9300", address.url)
        self.assertEqual("localhost:9300", str(address))

    def test_parse_ipv6(self):
        address = TransportAddress.parse("[::1]:9200")
        self.assertEqual("::1", address.host)
        self.assertEqual("http://[::1]:9200", address.url)
        self.assertEqual("[::1]:9200", str(address))

    def test_parse_returns_same_instance_for_addresses(self):
        address = TransportAddress("127.0.0.1", 9200)
        self.assertIs(address, TransportAddress.parse(address))

    def test_parse_rejects_other_forms(self):
        for value in ["localhost", "http://localhost:9200", "localhost:port", ":9200", "::1:9200"]:
            with self.subTest(value=value):
                self.assertRaises(ValueError, TransportAddress.parse, value)

    def test_port_range(self):
        self.assertRaises(ValueError, TransportAddress, "localhost", 0)
        self.assertRaises(ValueError, TransportAddress, "localhost", 65536)
        self.assertRaises(ValueError, TransportAddress, "", 9200)

    def test_equality(self):
        self.assertEqual(TransportAddress("127.0.0.1", 9200), TransportAddress.parse("127.0.0.1:9200"))
        self.assertNotEqual(TransportAddress("127.0.0.1", 9200), TransportAddress("127.0.0.1", 9201))
        self.assertEqual(1, len({TransportAddress("a", 1), TransportAddress("a", 1)}))


class TestInetSocketAddress(TestBase):
    def test_parse_resolved_address(self):
        address = InetSocketAddress.parse("127.0.0.1:9200")
        self.assertEqual("127.0.0.1", address.host)
        self.assertEqual(9200, address.port)
        self.assertIsNone(address.hostname)

    def test_parse_hostname_and_ip(self):
        address = InetSocketAddress.parse("node-1.example.com/10.0.0.7:9201")
        self.assertEqual("10.0.0.7", address.host)
        self.assertEqual(9201, address.port)
        self.assertEqual("node-1.example.com", address.hostname)

    def test_parse_ipv6(self):
        address = InetSocketAddress.parse("[fe80::1]:9200")
        self.assertEqual("fe80::1", address.host)

    def test_rejects_symbolic_names(self):
        self.assertRaises(ValueError, InetSocketAddress.parse, "localhost:9200")
        self.assertRaises(ValueError, InetSocketAddress.parse, "inet[/127.0.0.1:9200]")
        self.assertRaises(ValueError, InetSocketAddress.parse, None)


class TestServerNode(TestBase):
    def test_url_and_equality(self):
        node = ServerNode(TransportAddress("127.0.0.1", 9200), "acceptance")
        self.assertEqual("http://127.0.0.1:9200", node.url)
        self.assertEqual(node, ServerNode(TransportAddress("127.0.0.1", 9200)))
        self.assertEqual("127.0.0.1:9200", str(node))
