# coding: utf-8

# text written in place of empty fields
EMPTY = "N/A"

# keys in public
KEY_LINE = "line"
KEY_PID = "pid"
KEY_PROCESS = "process"
KEY_USER = "user"
KEY_GROUP = "group"
KEY_LEVEL = "level"
KEY_MESSAGE = "message"
KEY_WORDS = "words"
KEY_HOST = "host"
KEY_WHEN = "when"


class LogPatternError(Exception):
    """Base class of all exceptions raised by logpattern."""
    pass


class PatternSyntaxError(LogPatternError):
    """PatternSyntaxError is raised when a given template is malformed
    (e.g., unknown specifier, unterminated argument or group).

    It is always raised at compile time: no compiled chain is returned.
    """
    pass


class PatternMismatch(LogPatternError):
    """PatternMismatch is raised when the input does not conform
    to the compiled pattern at the current position.

    It is recoverable: alternations catch it to try the next branch,
    and :class:`~logpattern.reader.Reader` skips the line.
    If you use :meth:`~logpattern.pattern.EntryPattern.match` directly,
    use try-except with this exception.
    """
    pass


class StreamFailure(LogPatternError):
    """StreamFailure is raised when reading the underlying stream fails.

    A :class:`~logpattern.reader.Reader` records the first failure
    and raises it again on every following call.
    """
    pass


class Entry:
    """A log record, result of parsing one line.

    Every field is empty (zero, empty string, empty list or None)
    until an extractor of the pattern fills it.

    Attributes:
        line (str): Source line, set when the record is accepted.
        pid (int): Process id.
        process (str): Process name.
        user (str): User name.
        group (str): Group name.
        level (str): Severity level token.
        message (str): Free text message.
        words (list of str): Words extracted with ``%w``, in order.
        host (str): Host name or address.
        when (datetime.datetime): Timestamp, or None.
    """

    def __init__(self, line="", pid=0, process="", user="", group="",
                 level="", message="", words=None, host="", when=None):
        self.line = line
        self.pid = pid
        self.process = process
        self.user = user
        self.group = group
        self.level = level
        self.message = message
        self.words = list(words) if words is not None else []
        self.host = host
        self.when = when

    def as_dict(self):
        """Get the fields of this record as a dict."""
        return {KEY_LINE: self.line,
                KEY_PID: self.pid,
                KEY_PROCESS: self.process,
                KEY_USER: self.user,
                KEY_GROUP: self.group,
                KEY_LEVEL: self.level,
                KEY_MESSAGE: self.message,
                KEY_WORDS: list(self.words),
                KEY_HOST: self.host,
                KEY_WHEN: self.when}

    def save(self):
        return self.as_dict()

    def restore(self, state):
        for key, val in state.items():
            if isinstance(val, list):
                val = list(val)
            setattr(self, key, val)

    def __eq__(self, other):
        if not isinstance(other, Entry):
            return NotImplemented
        return self.as_dict() == other.as_dict()

    def __repr__(self):
        fields = ", ".join("{0}={1!r}".format(k, v)
                           for k, v in self.as_dict().items())
        return "Entry({0})".format(fields)
