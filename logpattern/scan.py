# coding: utf-8

"""Character classes, input cursor and primitive scanners
shared by the entry, time and host compilers."""

from ._common import PatternMismatch, PatternSyntaxError

# returned by Cursor.read() and Cursor.peek() at the end of input
EOL = ""


def is_digit(c):
    return "0" <= c <= "9"


def is_hexa(c):
    return is_digit(c) or "a" <= c <= "f" or "A" <= c <= "F"


def is_letter(c):
    return "a" <= c <= "z" or "A" <= c <= "Z"


def is_alpha(c):
    return is_digit(c) or is_letter(c) or c in ("-", "_")


def is_blank(c):
    return c in (" ", "\t")


def is_eol(c):
    return c == EOL


def is_quote(c):
    return c in ("'", '"')


class Cursor:
    """Rewindable reader over an immutable string.

    The position is a plain index, so rewinding is an assignment
    (see :attr:`pos`) and no character is ever copied.

    Args:
        text (str): Input text, usually one log line or one template.
    """

    def __init__(self, text):
        self._text = text
        self._pos = 0
        self._last = 0

    @property
    def text(self):
        return self._text

    @property
    def pos(self):
        return self._pos

    @pos.setter
    def pos(self, value):
        self.seek(value)

    def seek(self, pos):
        if pos < 0 or pos > len(self._text):
            raise ValueError("position {0} out of range".format(pos))
        self._pos = pos
        self._last = 0

    def remaining(self):
        return len(self._text) - self._pos

    def read(self):
        """Consume one character. Returns :data:`EOL` at the end of input."""
        if self._pos >= len(self._text):
            self._last = 0
            return EOL
        c = self._text[self._pos]
        self._pos += 1
        self._last = 1
        return c

    def unread(self):
        """Step back over the character returned by the last :meth:`read`.
        Does nothing if that read hit the end of input."""
        self._pos -= self._last
        self._last = 0

    def peek(self):
        if self._pos >= len(self._text):
            return EOL
        return self._text[self._pos]

    def rest(self):
        return self._text[self._pos:]

    def __repr__(self):
        return "Cursor({0!r}, pos={1})".format(self._text, self._pos)


def match_literal(cursor, literal):
    for want in literal:
        if cursor.read() != want:
            raise PatternMismatch("expected {0!r} at {1}".format(
                literal, cursor.pos))


def scan_string(cursor, length, accept):
    """Consume characters accepted by a predicate.

    Args:
        cursor (Cursor): input.
        length (int): Maximum number of characters, 0 for no limit.
            If positive, exactly this number of characters is required.
        accept (callable): Character predicate.

    Returns:
        str: Consumed characters. The first refused character
        is left in the input.
    """
    start = cursor.pos
    while length <= 0 or cursor.pos - start < length:
        c = cursor.read()
        if c == EOL or not accept(c):
            cursor.unread()
            break
    if length > 0 and cursor.pos - start != length:
        raise PatternMismatch("expected {0} characters at {1}".format(
            length, start))
    return cursor.text[start:cursor.pos]


def scan_int(cursor, width, accept=is_digit, base=10):
    """Consume an unsigned integer.

    With a positive width, exactly width accepted characters are required.
    With width 0, characters are consumed greedily and at least one is
    required.
    """
    start = cursor.pos
    if width > 0:
        for _ in range(width):
            c = cursor.read()
            if c == EOL or not accept(c):
                raise PatternMismatch("expected {0} digits at {1}".format(
                    width, start))
    else:
        scan_string(cursor, 0, accept)
        if cursor.pos == start:
            raise PatternMismatch("expected digits at {0}".format(start))
    return int(cursor.text[start:cursor.pos], base)


class Literal:
    """Step consuming a fixed text."""

    def __init__(self, text):
        self.text = text

    def __call__(self, _, cursor):
        match_literal(cursor, self.text)

    def __repr__(self):
        return "Literal({0!r})".format(self.text)


class Chain:
    """Ordered sequence of steps applied to one target.

    Every step is a callable taking the target (the record or accumulator
    being filled) and a :class:`Cursor`. The first step raising an
    exception aborts the chain.
    """

    def __init__(self, steps):
        self._steps = tuple(steps)

    @property
    def steps(self):
        return self._steps

    def __call__(self, target, cursor):
        for step in self._steps:
            step(target, cursor)

    def __len__(self):
        return len(self._steps)

    def __repr__(self):
        return "Chain({0!r})".format(list(self._steps))


def compile_template(template, specifiers, what):
    """Compile a sub-template (time or host format) into a :class:`Chain`.

    Args:
        template (str): Template string. ``%%`` is a literal percent sign.
        specifiers (dict): Specifier character to step. A str value is
            a shorthand, compiled recursively as a template.
        what (str): Name of the template kind, used in error messages.

    Returns:
        Chain
    """
    tmpl = Cursor(template)
    buf = []
    steps = []
    while tmpl.remaining() > 0:
        c = tmpl.read()
        if c != "%":
            buf.append(c)
            continue
        c = tmpl.read()
        if c == "%":
            buf.append(c)
            continue
        if c not in specifiers:
            if c == EOL:
                msg = "{0}: missing specifier after %".format(what)
            else:
                msg = "{0}: unknown specifier %{1}".format(what, c)
            raise PatternSyntaxError(msg)
        if buf:
            steps.append(Literal("".join(buf)))
            buf = []
        step = specifiers[c]
        if isinstance(step, str):
            step = compile_template(step, specifiers, what)
        steps.append(step)
    if buf:
        steps.append(Literal("".join(buf)))
    return Chain(steps)
