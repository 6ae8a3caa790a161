# coding: utf-8

"""logpattern.preset is a submodule to provide patterns
for frequently used log formats."""

from .pattern import compile_pattern
from .reader import Reader
from .writer import Writer

DEFAULT_INPUT = "[%t] [%h(%4:%p)]%b%u:%g:%n [%p:%l(INFO, WARNING)]:%b%m"
DEFAULT_OUTPUT = "%t %n[%p]: %m"

PRESETS = {
    # [2020-09-03 11:22:33+02:00] [192.0.2.1:22] root:wheel:sshd [12:INFO]: message
    "default": (DEFAULT_INPUT, DEFAULT_OUTPUT),
    # 2020-09-03 11:22:33 sshd[12]: message
    "simple": ("%t %n[%p]: %m", DEFAULT_OUTPUT),
    # Sep 03 11:22:33 host sshd[12]: message (year is not recorded)
    "syslog": ("%t(%b %d %H:%M:%S) %h(%h) %n@([%p]|): %m",
               "%t %h %n[%p]: %m"),
    # 2020-09-03T11:22:33.012345+02:00 INFO message
    "rfc3339": ("@(%t(%y-%m-%dT%H:%M:%S.%f%Z)|%t(%R)) %l %m", "%t %l %m"),
    # 1599124953 host message
    "unix": ("%t(%s) %h %m", "%t %h %m"),
}


def get_preset(name):
    """Get input and output patterns of a preset.

    Args:
        name (str): Preset name, one of :data:`PRESETS`.

    Returns:
        tuple: input pattern and output pattern.
    """
    try:
        return PRESETS[name]
    except KeyError:
        msg = "unknown preset {0}, use one of {1}".format(
            name, ", ".join(sorted(PRESETS)))
        raise KeyError(msg) from None


def default_pattern():
    """Generate :class:`~logpattern.pattern.EntryPattern` with
    :data:`DEFAULT_INPUT`.

    The default pattern is designed for lines such as

    | ``[2020-09-03 11:22:33] [192.0.2.1:22] root:wheel:sshd [12:INFO]: started``

    Only INFO and WARNING levels are accepted.
    """
    return compile_pattern(DEFAULT_INPUT)


def default_reader(stream, filter=None):
    """Generate :class:`~logpattern.reader.Reader` on stream
    with :data:`DEFAULT_INPUT`."""
    return Reader(stream, default_pattern(), filter=filter)


def default_writer(stream):
    """Generate :class:`~logpattern.writer.Writer` on stream
    with :data:`DEFAULT_OUTPUT`."""
    return Writer(stream, DEFAULT_OUTPUT)
