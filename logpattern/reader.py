# coding: utf-8

import logging

from ._common import Entry, PatternMismatch, PatternSyntaxError, StreamFailure
from .pattern import compile_pattern

_logger = logging.getLogger(__name__)


def accept_all(_):
    return True


def compile_filter(filter):
    """Compile a filter into a predicate over :class:`~logpattern.Entry`.

    Args:
        filter (None, str or callable): None or an empty string accepts
            every entry. A callable is used as is.

    Raises:
        PatternSyntaxError: Filter expressions (non-empty strings)
            are not supported.
    """
    if filter is None or filter == "":
        return accept_all
    if callable(filter):
        return filter
    raise PatternSyntaxError("unsupported filter {0!r}".format(filter))


def strip_line_feed(line):
    """Remove one trailing line feed (\\n or \\r\\n), nothing else."""
    if line.endswith("\n"):
        line = line[:-1]
        if line.endswith("\r"):
            line = line[:-1]
    return line


def _strip_line(line, encoding):
    if isinstance(line, bytes):
        line = line.decode(encoding)
    return strip_line_feed(line)


class Reader:
    """Read log entries from a stream of lines.

    Lines that are empty, that do not match the pattern, or that
    the filter rejects are skipped. Reading stops either when the stream
    is exhausted (:meth:`read` returns None from then on) or when reading
    the stream, or applying the filter, fails (:meth:`read` raises the same
    :class:`~logpattern.StreamFailure` from then on).

    Example:
        >>> import io
        >>> r = Reader(io.StringIO("bad line\\nsshd[12]: up\\n"), "%n[%p]: %m")
        >>> r.read().pid
        12
        >>> r.read() is None
        True

    Args:
        stream (iterable): Source of lines, usually a file object.
            Lines in bytes are decoded with encoding.
        pattern (str or :class:`~logpattern.pattern.EntryPattern`):
            Entry pattern.
        filter (None, str or callable, optional): See :func:`compile_filter`.
        encoding (str, optional): Encoding of lines given in bytes.
    """

    def __init__(self, stream, pattern, filter=None, encoding="utf-8"):
        self._pattern = compile_pattern(pattern)
        self._keep = compile_filter(filter)
        self._lines = iter(stream)
        self._encoding = encoding
        self._lineno = 0
        self._done = False
        self._err = None

    @property
    def pattern(self):
        return self._pattern

    @property
    def lineno(self):
        """int: Number of lines read from the stream so far."""
        return self._lineno

    def _next_line(self):
        try:
            line = next(self._lines)
        except StopIteration:
            return None
        self._lineno += 1
        return _strip_line(line, self._encoding)

    def read(self):
        """Read the next accepted entry.

        Returns:
            :class:`~logpattern.Entry`, or None if the stream is exhausted.

        Raises:
            StreamFailure: Reading the stream failed
                (in this call or in a previous one).
        """
        if self._err is not None:
            raise self._err
        if self._done:
            return None

        while True:
            try:
                line = self._next_line()
            except Exception as e:
                return self._fail(e)
            if line is None:
                self._done = True
                return None
            if line == "":
                continue

            entry = Entry()
            try:
                self._pattern.fill(entry, line)
            except PatternMismatch as e:
                _logger.debug("line %d: mismatch (%s)", self._lineno, e)
                continue
            except Exception as e:
                return self._fail(e)

            try:
                keep = self._keep(entry)
            except Exception as e:
                return self._fail(e)
            if not keep:
                _logger.debug("line %d: filtered", self._lineno)
                continue
            entry.line = line
            return entry

    def _fail(self, exc):
        msg = "line {0}: {1}: {2}".format(self._lineno, type(exc).__name__,
                                          exc)
        _logger.error("reading failed at %s", msg)
        self._err = StreamFailure(msg)
        self._err.__cause__ = exc
        raise self._err

    def read_all(self):
        """Read entries until the stream is exhausted.

        Returns:
            list of :class:`~logpattern.Entry`

        Raises:
            StreamFailure: Reading the stream failed.
        """
        return list(self)

    def __iter__(self):
        while True:
            entry = self.read()
            if entry is None:
                return
            yield entry


def compile_reader(stream, pattern, filter=None, **kwargs):
    """Compile pattern and filter, and get a :class:`Reader` on stream.

    Raises:
        PatternSyntaxError: The pattern or the filter is malformed.
    """
    return Reader(stream, pattern, filter=filter, **kwargs)
