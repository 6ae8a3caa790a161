# coding: utf-8

"""Output patterns, compiled into a chain of formatters.

Available specifiers:

* ``%t``: timestamp (RFC 3339)
* ``%n``: process name
* ``%p``: process id
* ``%u``: user name
* ``%g``: group name
* ``%h``: host
* ``%l``: level
* ``%m``: message
* ``%#``: source line
* ``%0``, ``%1``, ...: word at the given index
* ``%%``: a percent sign

Empty fields are written as :data:`~logpattern._common.EMPTY`.
"""

import datetime

from ._common import EMPTY, PatternSyntaxError
from .scan import EOL, Cursor, is_digit, scan_int


def format_string(value):
    if not value:
        return EMPTY
    return value


def format_time(entry):
    when = entry.when
    if when is None:
        return EMPTY
    if when.tzinfo is None:
        when = when.replace(tzinfo=datetime.timezone.utc)
    text = when.replace(microsecond=0).isoformat()
    if text.endswith("+00:00"):
        text = text[:-len("+00:00")] + "Z"
    return text


def format_pid(entry):
    if entry.pid > 0:
        return str(entry.pid)
    return EMPTY


def format_process(entry):
    return format_string(entry.process)


def format_user(entry):
    return format_string(entry.user)


def format_group(entry):
    return format_string(entry.group)


def format_host(entry):
    return format_string(entry.host)


def format_level(entry):
    return format_string(entry.level)


def format_message(entry):
    return format_string(entry.message)


def format_line(entry):
    return format_string(entry.line)


class FormatWord:

    def __init__(self, index):
        self.index = index

    def __call__(self, entry):
        if 0 <= self.index < len(entry.words):
            return format_string(entry.words[self.index])
        return EMPTY

    def __repr__(self):
        return "FormatWord({0})".format(self.index)


class FormatLiteral:

    def __init__(self, text):
        self.text = text

    def __call__(self, _):
        return self.text

    def __repr__(self):
        return "FormatLiteral({0!r})".format(self.text)


FORMATTERS = {
    "t": format_time,
    "n": format_process,
    "p": format_pid,
    "u": format_user,
    "g": format_group,
    "h": format_host,
    "l": format_level,
    "m": format_message,
    "#": format_line,
}


class OutputPattern:
    """Compiled output pattern.

    Args:
        pattern (str): Output pattern.

    Raises:
        PatternSyntaxError: The pattern is malformed.
    """

    def __init__(self, pattern):
        if pattern == "":
            raise PatternSyntaxError("empty pattern not allowed")
        self._pattern = pattern
        self._formatters = tuple(self._compile(pattern))

    @property
    def pattern(self):
        return self._pattern

    @staticmethod
    def _compile(pattern):
        tmpl = Cursor(pattern)
        buf = []
        formatters = []
        while tmpl.remaining() > 0:
            c = tmpl.read()
            if c != "%":
                buf.append(c)
                continue
            c = tmpl.read()
            if c == "%":
                buf.append(c)
                continue
            if buf:
                formatters.append(FormatLiteral("".join(buf)))
                buf = []
            if c in FORMATTERS:
                formatters.append(FORMATTERS[c])
            elif is_digit(c):
                tmpl.unread()
                formatters.append(FormatWord(scan_int(tmpl, 0)))
            elif c == EOL:
                raise PatternSyntaxError("print: missing specifier after %")
            else:
                raise PatternSyntaxError(
                    "print: unknown specifier %{0}".format(c))
        if buf:
            formatters.append(FormatLiteral("".join(buf)))
        return formatters

    def format(self, entry):
        """Render an entry into one line of text (without line feed)."""
        return "".join(f(entry) for f in self._formatters)

    def __repr__(self):
        return "OutputPattern({0!r})".format(self._pattern)


class Writer:
    """Write log entries as lines of text.

    Args:
        stream: Text sink with a write() method (flushed if possible).
        pattern (str or :class:`OutputPattern`): Output pattern.
    """

    def __init__(self, stream, pattern):
        self._stream = stream
        self._pattern = compile_output(pattern)

    @property
    def pattern(self):
        return self._pattern

    def format(self, entry):
        return self._pattern.format(entry)

    def write(self, entry):
        """Write one entry, followed by a line feed."""
        self._stream.write(self._pattern.format(entry) + "\n")
        flush = getattr(self._stream, "flush", None)
        if flush is not None:
            flush()


def compile_output(pattern):
    if isinstance(pattern, OutputPattern):
        return pattern
    return OutputPattern(pattern)


def compile_writer(stream, pattern):
    """Compile an output pattern and get a :class:`Writer` on stream.

    Raises:
        PatternSyntaxError: The pattern is malformed.
    """
    return Writer(stream, pattern)
