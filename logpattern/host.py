# coding: utf-8

"""Host sub-templates, used as the argument of the ``%h`` specifier.

Available specifiers:

* ``%4``: IPv4 address (e.g., ``192.0.2.1`` or ``[192.0.2.1]``)
* ``%6``: IPv6 address (e.g., ``2001:db8::1`` or ``[2001:db8::1]``)
* ``%p``: port
* ``%m``: netmask length
* ``%h``: short hostname
* ``%f``: fully qualified domain name
* ``%F``: same as ``%4:%p``
* ``%S``: same as ``%6:%p``
* ``%Q``: same as ``%f:%p``
* ``%%``: a percent sign
"""

from ._common import PatternMismatch
from .scan import compile_template, is_alpha, is_digit, is_hexa, \
    scan_int, scan_string

IPV4_LEN = 4
IPV6_LEN = 8

IPV4_LONG = "%4:%p"
IPV6_LONG = "%6:%p"
FQDN_LONG = "%f:%p"


class Host:
    """Accumulator of host components.

    Rendered as the name if one was extracted,
    otherwise as ``addr:port``.
    """

    def __init__(self):
        self.name = ""
        self.addr = ""
        self.mask = 0
        self.port = 0

    def __str__(self):
        if self.name:
            return self.name
        return "{0}:{1}".format(self.addr, self.port)

    def __repr__(self):
        return "Host(name={0!r}, addr={1!r}, mask={2}, port={3})".format(
            self.name, self.addr, self.mask, self.port)


def _open_bracket(cursor):
    if cursor.peek() == "[":
        cursor.read()
        return True
    return False


def _close_bracket(cursor, bracket):
    if bracket:
        if cursor.peek() != "]":
            raise PatternMismatch("expected ] at {0}".format(cursor.pos))
        cursor.read()


def parse_ipv4(h, cursor):
    bracket = _open_bracket(cursor)
    octets = []
    for i in range(IPV4_LEN):
        octet = scan_int(cursor, 0)
        if octet > 0xFF:
            raise PatternMismatch("invalid ipv4 octet {0}".format(octet))
        octets.append(str(octet))
        if i < IPV4_LEN - 1:
            if cursor.peek() != ".":
                raise PatternMismatch("expected . at {0}".format(cursor.pos))
            cursor.read()
    _close_bracket(cursor, bracket)
    h.addr = ".".join(octets)


def parse_ipv6(h, cursor):
    """IPv6 address, kept in its compressed form."""
    bracket = _open_bracket(cursor)
    buf = []
    groups = 0
    compressed = False
    if cursor.peek() == ":":
        cursor.read()
        if cursor.peek() != ":":
            raise PatternMismatch("expected :: at {0}".format(cursor.pos))
        cursor.read()
        buf.append("::")
        compressed = True

    while groups < IPV6_LEN:
        if not is_hexa(cursor.peek()):
            if buf and buf[-1] == "::":
                # trailing compression marker (e.g., "2001:db8::")
                break
            raise PatternMismatch("expected ipv6 group at {0}".format(
                cursor.pos))
        group = scan_int(cursor, 0, is_hexa, base=16)
        if group > 0xFFFF:
            raise PatternMismatch("invalid ipv6 group {0:x}".format(group))
        buf.append("{0:x}".format(group))
        groups += 1
        if groups == IPV6_LEN or cursor.peek() != ":":
            break
        cursor.read()
        if cursor.peek() == ":":
            if compressed:
                raise PatternMismatch("duplicated :: at {0}".format(
                    cursor.pos))
            cursor.read()
            buf.append("::")
            compressed = True
        else:
            buf.append(":")
    _close_bracket(cursor, bracket)
    h.addr = "".join(buf)


def parse_port(h, cursor):
    port = scan_int(cursor, 0)
    if port > 0xFFFF:
        raise PatternMismatch("invalid port {0}".format(port))
    h.port = port


def parse_mask(h, cursor):
    mask = scan_int(cursor, 0)
    if mask > 32:
        raise PatternMismatch("invalid netmask {0}".format(mask))
    h.mask = mask


def parse_hostname(h, cursor):
    name = scan_string(cursor, 0, is_alpha)
    if name == "":
        raise PatternMismatch("expected hostname at {0}".format(cursor.pos))
    h.name = name


def parse_fqdn(h, cursor):
    labels = []
    while True:
        labels.append(scan_string(cursor, 0, is_alpha))
        if cursor.peek() != ".":
            break
        cursor.read()
    name = ".".join(labels)
    if name == "":
        raise PatternMismatch("expected domain name at {0}".format(
            cursor.pos))
    h.name = name


SPECIFIERS = {
    "4": parse_ipv4,
    "6": parse_ipv6,
    "p": parse_port,
    "m": parse_mask,
    "h": parse_hostname,
    "f": parse_fqdn,
    "F": IPV4_LONG,
    "S": IPV6_LONG,
    "Q": FQDN_LONG,
}


def compile_host(template):
    """Compile a host template into a chain filling a :class:`Host`.

    Raises:
        PatternSyntaxError: Unknown specifier in the template.
    """
    return compile_template(template, SPECIFIERS, "host")


class HostField:
    """Entry step extracting :attr:`Entry.host` with a host template."""

    def __init__(self, template):
        self.template = template
        self._chain = compile_host(template)

    def __call__(self, entry, cursor):
        h = Host()
        self._chain(h, cursor)
        entry.host = str(h)

    def __repr__(self):
        return "HostField({0!r})".format(self.template)
