# coding: utf-8

"""Entry patterns, compiled into a chain of extractors.

Available specifiers:

* ``%t``: timestamp, argument is a time template
  (see :mod:`logpattern.timestamp`, defaults to ``%I``, not ``%R``:
  date and time separated by a space, zone optional)
* ``%h``: host, argument is a host template
  (see :mod:`logpattern.host`, defaults to ``%f``)
* ``%l``: level, argument is a comma separated list of accepted levels
  (empty or ``-`` accepts any level)
* ``%n``: process name
* ``%p``: process id
* ``%u``: user name
* ``%g``: group name
* ``%m``: message, rest of the line
* ``%w``: one word, delimited by blanks or enclosed in quotes
* ``%b``: blanks, discarded
* ``%*``: discard characters until the next character of the pattern
* ``%%``: a percent sign

Other syntax:

* ``@(alt1|alt2|...)``: try alternatives in order
* ``\\X``: escape one of ``\\ @ * ( ) |``

Example:
    >>> p = compile_pattern("%t %n[%p]: %m")
    >>> e = p.match("2023-05-01 10:22:31 sshd[1234]: Accepted password")
    >>> e.process, e.pid, e.message
    ('sshd', 1234, 'Accepted password')
"""

import bisect

from ._common import Entry, PatternMismatch, PatternSyntaxError
from .host import HostField
from .scan import EOL, Chain, Cursor, Literal, is_alpha, is_blank, \
    is_eol, is_letter, is_quote, scan_int, scan_string
from .timestamp import ISO_PATTERN, TimeField

MAX_ARGUMENT = 64
ESCAPABLE = ("\\", "@", "*", "(", ")", "|")


def parse_process(entry, cursor):
    entry.process = scan_string(cursor, 0, is_alpha)


def parse_pid(entry, cursor):
    entry.pid = scan_int(cursor, 0)


def parse_user(entry, cursor):
    entry.user = scan_string(cursor, 0, is_alpha)


def parse_group(entry, cursor):
    entry.group = scan_string(cursor, 0, is_alpha)


def parse_blank(_, cursor):
    scan_string(cursor, 0, is_blank)


def parse_message(entry, cursor):
    entry.message = cursor.rest()
    cursor.pos = len(cursor.text)


def parse_word(entry, cursor):
    quote = cursor.peek()
    if is_quote(quote):
        cursor.read()
        start = cursor.pos
        while True:
            c = cursor.read()
            if is_eol(c):
                raise PatternMismatch("unterminated {0} at {1}".format(
                    quote, start))
            if c == quote:
                break
        word = cursor.text[start:cursor.pos - 1]
    else:
        word = scan_string(cursor, 0, lambda c: not is_blank(c))
    word = word.strip()
    if word:
        entry.words.append(word)


class Level:
    """Step extracting :attr:`Entry.level`, restricted to an allow-list."""

    def __init__(self, levels):
        self.levels = tuple(sorted(levels))

    def __call__(self, entry, cursor):
        level = scan_string(cursor, 0, is_letter)
        if self.levels:
            x = bisect.bisect_left(self.levels, level)
            if x >= len(self.levels) or self.levels[x] != level:
                raise PatternMismatch("level {0!r} not accepted".format(
                    level))
        entry.level = level

    def __repr__(self):
        return "Level({0!r})".format(list(self.levels))


class Discard:
    """Step skipping characters until a delimiter (not consumed).
    With an empty delimiter, skip the rest of the line."""

    def __init__(self, until):
        self.until = until

    def __call__(self, _, cursor):
        if self.until == EOL:
            cursor.pos = len(cursor.text)
        else:
            scan_string(cursor, 0, lambda c: c != self.until)

    def __repr__(self):
        return "Discard({0!r})".format(self.until)


class Alternation:
    """Step trying sub-patterns in order.

    The cursor and the record are restored before each attempt,
    so a failed branch never leaks into the next one.
    """

    def __init__(self, branches):
        self.branches = tuple(branches)

    def __call__(self, entry, cursor):
        start = cursor.pos
        state = entry.save()
        for branch in self.branches:
            try:
                branch(entry, cursor)
            except PatternMismatch:
                cursor.pos = start
                entry.restore(state)
            else:
                return
        raise PatternMismatch("no alternative matched at {0}".format(start))

    def __repr__(self):
        return "Alternation({0!r})".format(list(self.branches))


def parse_argument(tmpl, default, what):
    """Read the optional parenthesized argument of a specifier.

    Returns:
        str: the argument, or default if no argument is given.
    """
    if tmpl.peek() != "(":
        if default is None:
            raise PatternSyntaxError("{0}: missing (".format(what))
        return default
    tmpl.read()
    buf = []
    while tmpl.remaining() > 0:
        c = tmpl.read()
        if c == ")":
            return "".join(buf)
        buf.append(c)
        if len(buf) > MAX_ARGUMENT:
            msg = "{0}: argument too long ({1})".format(what, "".join(buf))
            raise PatternSyntaxError(msg)
    raise PatternSyntaxError("{0}: missing )".format(what))


def _parse_level_argument(arg):
    arg = "".join(c for c in arg if not is_blank(c))
    if arg in ("", "-"):
        return []
    return arg.split(",")


def _next_character(tmpl):
    # character that follows a specifier, used as the %* delimiter
    c = tmpl.peek()
    if c == "\\":
        pos = tmpl.pos
        tmpl.read()
        c = tmpl.peek()
        tmpl.pos = pos
    return c


def parse_specifier(tmpl, c):
    if c == "t":
        return TimeField(parse_argument(tmpl, ISO_PATTERN, "time"))
    elif c == "h":
        return HostField(parse_argument(tmpl, "%f", "host"))
    elif c == "l":
        return Level(_parse_level_argument(parse_argument(tmpl, "-",
                                                          "level")))
    elif c == "n":
        return parse_process
    elif c == "p":
        return parse_pid
    elif c == "u":
        return parse_user
    elif c == "g":
        return parse_group
    elif c == "b":
        return parse_blank
    elif c == "m":
        return parse_message
    elif c == "w":
        return parse_word
    elif c == "*":
        return Discard(_next_character(tmpl))
    elif c == EOL:
        raise PatternSyntaxError("missing specifier after %")
    else:
        raise PatternSyntaxError("unsupported specifier %{0}".format(c))


def parse_alternation(tmpl):
    if tmpl.read() != "(":
        raise PatternSyntaxError("missing ( after @")
    branches = []
    while True:
        last, chain = parse_until(tmpl, ("|", ")"))
        if last not in ("|", ")"):
            raise PatternSyntaxError("unterminated alternation")
        branches.append(chain)
        if last == ")":
            break
    if len(branches) == 1 and len(branches[0]) == 0:
        raise PatternSyntaxError("empty alternation")
    return Alternation(branches)


def parse_until(tmpl, stop):
    """Compile the template until one of the stop characters
    (or the end of the template).

    Returns:
        tuple: the character that ended the scan
        (:data:`~logpattern.scan.EOL` at the end), and the compiled Chain.
    """
    steps = []
    buf = []

    def _flush():
        if buf:
            steps.append(Literal("".join(buf)))
            del buf[:]

    while True:
        last = tmpl.read()
        if last == EOL or last in stop:
            break
        if last == "%":
            c = tmpl.read()
            if c == "%":
                buf.append(c)
                continue
            _flush()
            steps.append(parse_specifier(tmpl, c))
        elif last == "@":
            _flush()
            steps.append(parse_alternation(tmpl))
        elif last == "\\":
            c = tmpl.read()
            if c not in ESCAPABLE:
                raise PatternSyntaxError(
                    "invalid escaped character {0!r}".format(c))
            buf.append(c)
        else:
            buf.append(last)
    _flush()
    return last, Chain(steps)


class EntryPattern:
    """Compiled entry pattern.

    Compile it once with :func:`compile_pattern`,
    then use it for every line.

    Args:
        pattern (str): Entry pattern.
    """

    def __init__(self, pattern):
        if pattern == "":
            raise PatternSyntaxError("empty pattern not allowed")
        self._pattern = pattern
        _, self._chain = parse_until(Cursor(pattern), ())

    @property
    def pattern(self):
        return self._pattern

    @property
    def chain(self):
        return self._chain

    def fill(self, entry, line):
        """Apply the extractors on a line, filling the given entry.

        Raises:
            PatternMismatch: The line does not match.
        """
        self._chain(entry, Cursor(line))
        return entry

    def match(self, line):
        """Parse a line into a new :class:`~logpattern.Entry`.
        :attr:`~logpattern.Entry.line` is set to the given line.

        Raises:
            PatternMismatch: The line does not match.
        """
        entry = self.fill(Entry(), line)
        entry.line = line
        return entry

    def parse(self, line):
        """Same as :meth:`match`, but returns None on mismatch."""
        try:
            return self.match(line)
        except PatternMismatch:
            return None

    def __repr__(self):
        return "EntryPattern({0!r})".format(self._pattern)


def compile_pattern(pattern):
    """Compile an entry pattern.

    Args:
        pattern (str or EntryPattern): Entry pattern.
            Compiled patterns are returned as is.

    Returns:
        EntryPattern

    Raises:
        PatternSyntaxError: The pattern is malformed.
    """
    if isinstance(pattern, EntryPattern):
        return pattern
    return EntryPattern(pattern)
