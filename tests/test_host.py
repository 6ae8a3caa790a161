import unittest

from logpattern import PatternMismatch, PatternSyntaxError
from logpattern.host import Host, compile_host
from logpattern.scan import Cursor


def parse_host(template, text):
    h = Host()
    cursor = Cursor(text)
    compile_host(template)(h, cursor)
    return h, cursor


class TestHost(unittest.TestCase):

    def test_ipv4_port(self):
        h, _ = parse_host("%4:%p", "192.168.1.10:22")
        assert h.addr == "192.168.1.10"
        assert h.port == 22
        assert str(h) == "192.168.1.10:22"

        h, _ = parse_host("%F", "[10.0.0.1]:8080")
        assert str(h) == "10.0.0.1:8080"

    def test_ipv4_invalid(self):
        with self.assertRaises(PatternMismatch):
            parse_host("%4", "192.168.1.256")
        with self.assertRaises(PatternMismatch):
            parse_host("%4", "192.168.1")
        with self.assertRaises(PatternMismatch):
            parse_host("%4", "192.168-1.1")
        with self.assertRaises(PatternMismatch):
            parse_host("%4", "[192.168.1.1")
        with self.assertRaises(PatternMismatch):
            parse_host("%4", "example.com")

    def test_ipv6(self):
        h, cursor = parse_host("%6", "2001:0db8:0:0:0:0:0:1 rest")
        assert h.addr == "2001:db8:0:0:0:0:0:1"
        assert cursor.peek() == " "

        # compressed form is kept as is
        h, _ = parse_host("%6", "2001:db8::1")
        assert h.addr == "2001:db8::1"
        h, _ = parse_host("%6", "::1")
        assert h.addr == "::1"
        h, _ = parse_host("%6", "fe80::")
        assert h.addr == "fe80::"

        h, _ = parse_host("%S", "[2001:DB8::beef]:443")
        assert str(h) == "2001:db8::beef:443"

    def test_ipv6_invalid(self):
        with self.assertRaises(PatternMismatch):
            parse_host("%6", "1::2::3")
        with self.assertRaises(PatternMismatch):
            parse_host("%6", "12345::1")
        with self.assertRaises(PatternMismatch):
            parse_host("%6", "[::1")
        with self.assertRaises(PatternMismatch):
            parse_host("%6", ":1")

    def test_names(self):
        h, _ = parse_host("%f", "host-1.example.org rest")
        assert str(h) == "host-1.example.org"
        h, _ = parse_host("%h", "host-1.example.org")
        assert str(h) == "host-1"
        h, _ = parse_host("%Q", "example.com:80")
        # the name takes priority over address and port
        assert str(h) == "example.com"
        assert h.port == 80
        with self.assertRaises(PatternMismatch):
            parse_host("%f", ":80")
        with self.assertRaises(PatternMismatch):
            parse_host("%h", " message")

    def test_port_and_mask(self):
        h, _ = parse_host("%4/%m", "10.0.0.0/24")
        assert h.mask == 24
        with self.assertRaises(PatternMismatch):
            parse_host("%4/%m", "10.0.0.0/33")
        with self.assertRaises(PatternMismatch):
            parse_host("%4:%p", "10.0.0.1:65536")

    def test_syntax(self):
        with self.assertRaises(PatternSyntaxError):
            compile_host("%4:%x")
