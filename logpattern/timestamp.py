# coding: utf-8

"""Time sub-templates, used as the argument of the ``%t`` specifier.

Available specifiers:

* ``%y``: year (4 digits)
* ``%m``: month (2 digits)
* ``%b``: abbreviated month name (e.g., ``Jan``, case insensitive)
* ``%a``: abbreviated day name (e.g., ``Mon``, checked and discarded)
* ``%d``: day of month (2 digits)
* ``%j``: day of year (3 digits)
* ``%H``: hour (2 digits)
* ``%M``: minute (2 digits)
* ``%S``: second (2 digits)
* ``%f``: fraction of second (up to 9 significant digits)
* ``%s``: unix timestamp in seconds
* ``%Z``: timezone (``Z``, ``+09``, ``+0900`` or ``+09:00``),
  UTC if absent
* ``%I``: same as ``%y-%m-%d %H:%M:%S%Z``
* ``%R``: same as ``%y-%m-%dT%H:%M:%S%Z``
* ``%%``: a percent sign
"""

import bisect
import datetime

from ._common import PatternMismatch
from .scan import compile_template, is_digit, is_letter, scan_int, scan_string

ISO_PATTERN = "%y-%m-%d %H:%M:%S%Z"
RFC_PATTERN = "%y-%m-%dT%H:%M:%S%Z"

# sorted for binary search; index in MONTH_ORDER gives the month number
MONTH_ORDER = ("jan", "feb", "mar", "apr", "may", "jun",
               "jul", "aug", "sep", "oct", "nov", "dec")
MONTHS = tuple(sorted(MONTH_ORDER))
DAYS = tuple(sorted(("mon", "tue", "wed", "thu", "fri", "sat", "sun")))

_FRACTION_DIGITS = 9


class When:
    """Accumulator of timestamp components.

    The time specifiers fill the components one by one,
    and :meth:`to_datetime` resolves them into one timestamp.
    """

    def __init__(self):
        self.year = 0
        self.month = 0
        self.day = 0
        self.hour = 0
        self.minute = 0
        self.second = 0
        self.fraction = 0  # nanoseconds
        self.yday = 0
        self.zone = 0  # utc offset in seconds
        self.unix = None

    def tzinfo(self):
        if self.zone == 0:
            return datetime.timezone.utc
        return datetime.timezone(datetime.timedelta(seconds=self.zone))

    def to_datetime(self):
        """Resolve the components into an aware datetime.datetime.

        A unix timestamp overrides every other component.
        Missing year, month and day default to 1.

        Raises:
            PatternMismatch: The components do not form a valid timestamp.
        """
        if self.unix is not None:
            try:
                return datetime.datetime.fromtimestamp(
                    self.unix, tz=datetime.timezone.utc)
            except (OverflowError, OSError, ValueError) as e:
                raise PatternMismatch(
                    "invalid unix timestamp {0}".format(self.unix)) from e

        try:
            dt = datetime.datetime(self.year or 1, self.month or 1,
                                   self.day or 1, self.hour, self.minute,
                                   self.second, self.fraction // 1000,
                                   tzinfo=self.tzinfo())
            if self.yday > 0:
                current = dt.timetuple().tm_yday
                dt += datetime.timedelta(days=self.yday - current)
        except (OverflowError, ValueError) as e:
            raise PatternMismatch(str(e)) from e
        return dt

    def __repr__(self):
        return "When({0})".format(", ".join(
            "{0}={1!r}".format(k, v) for k, v in vars(self).items()))


def _lookup(table, name):
    name = name.lower()
    x = bisect.bisect_left(table, name)
    if x >= len(table) or table[x] != name:
        raise PatternMismatch("unknown name {0!r}".format(name))
    return x


def parse_year(w, cursor):
    w.year = scan_int(cursor, 4)


def parse_month(w, cursor):
    w.month = scan_int(cursor, 2)


def parse_day(w, cursor):
    w.day = scan_int(cursor, 2)


def parse_yday(w, cursor):
    w.yday = scan_int(cursor, 3)


def parse_hour(w, cursor):
    w.hour = scan_int(cursor, 2)


def parse_minute(w, cursor):
    w.minute = scan_int(cursor, 2)


def parse_second(w, cursor):
    w.second = scan_int(cursor, 2)


def parse_unix(w, cursor):
    w.unix = scan_int(cursor, 0)


def parse_month_name(w, cursor):
    name = scan_string(cursor, 3, is_letter)
    x = _lookup(MONTHS, name)
    w.month = MONTH_ORDER.index(MONTHS[x]) + 1


def parse_day_name(w, cursor):
    _lookup(DAYS, scan_string(cursor, 3, is_letter))


def parse_fraction(w, cursor):
    """Fraction of second, scaled by its number of digits
    (``5`` is 500ms, ``005`` is 5ms). Digits beyond nanoseconds
    are consumed and ignored."""
    digits = scan_string(cursor, 0, is_digit)
    if digits == "":
        raise PatternMismatch("expected fraction digits at {0}".format(
            cursor.pos))
    digits = digits[:_FRACTION_DIGITS].ljust(_FRACTION_DIGITS, "0")
    w.fraction = int(digits)


def parse_zone(w, cursor):
    """Timezone, optional: without a designator the timestamp is UTC."""
    sign = cursor.peek()
    if sign == "Z":
        cursor.read()
        w.zone = 0
        return
    if sign not in ("+", "-"):
        return
    cursor.read()

    offset = scan_int(cursor, 2) * 60 * 60
    if cursor.peek() == ":":
        cursor.read()
    if is_digit(cursor.peek()):
        offset += scan_int(cursor, 2) * 60
    if sign == "-":
        offset = -offset
    w.zone = offset


SPECIFIERS = {
    "y": parse_year,
    "m": parse_month,
    "d": parse_day,
    "j": parse_yday,
    "a": parse_day_name,
    "b": parse_month_name,
    "s": parse_unix,
    "H": parse_hour,
    "M": parse_minute,
    "S": parse_second,
    "f": parse_fraction,
    "Z": parse_zone,
    "I": ISO_PATTERN,
    "R": RFC_PATTERN,
}


def compile_time(template=""):
    """Compile a time template into a chain filling a :class:`When`.

    Args:
        template (str, optional): Time template.
            Defaults to :data:`ISO_PATTERN`.

    Returns:
        scan.Chain

    Raises:
        PatternSyntaxError: Unknown specifier in the template.
    """
    if template == "":
        template = ISO_PATTERN
    return compile_template(template, SPECIFIERS, "time")


class TimeField:
    """Entry step extracting :attr:`Entry.when` with a time template."""

    def __init__(self, template):
        self.template = template
        self._chain = compile_time(template)

    def __call__(self, entry, cursor):
        w = When()
        self._chain(w, cursor)
        entry.when = w.to_datetime()

    def __repr__(self):
        return "TimeField({0!r})".format(self.template)
