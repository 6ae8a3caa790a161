# coding: utf-8

import collections
import configparser
import logging
import os.path

from .pattern import compile_pattern
from .preset import DEFAULT_OUTPUT
from .reader import Reader
from .writer import Writer, compile_output

_logger = logging.getLogger(__name__)

SECTION_GENERAL = "general"
SOURCE_PREFIX = "source:"


class LogSource:
    """A log file and the patterns to read and write its entries.

    Args:
        file (str): Path of the log file.
        pattern (str): Entry pattern of the lines in file.
        output (str, optional): Output pattern.
        label (str, optional): Name of the source.
            Defaults to the file name without extension.
        lines (int, optional): Number of lines read from the end
            of the file by :meth:`read_entries`. 0 reads the whole file.
    """

    def __init__(self, file, pattern, output=DEFAULT_OUTPUT, label=None,
                 lines=0):
        self.file = file
        self.pattern = compile_pattern(pattern)
        self.output = compile_output(output)
        if not label:
            label = os.path.splitext(os.path.basename(file))[0]
        self.label = label
        self.lines = lines

    def tail(self, limit=None, encoding="utf-8"):
        """Get the last lines of the file.

        Args:
            limit (int, optional): Number of lines.
                Defaults to :attr:`lines`, 0 means all lines.

        Returns:
            list of str
        """
        if limit is None:
            limit = self.lines
        with open(self.file, "rt", encoding=encoding) as f:
            if limit > 0:
                return list(collections.deque(f, maxlen=limit))
            return f.readlines()

    def read_entries(self, limit=None, filter=None, encoding="utf-8"):
        """Parse the last lines of the file.
        Timestamps are truncated to the second.

        Returns:
            list of :class:`~logpattern.Entry`
        """
        lines = self.tail(limit, encoding=encoding)
        entries = Reader(lines, self.pattern, filter=filter).read_all()
        for entry in entries:
            if entry.when is not None:
                entry.when = entry.when.replace(microsecond=0)
        _logger.debug("%s: %d entries in %d lines",
                      self.label, len(entries), len(lines))
        return entries

    def reader(self, stream, filter=None):
        return Reader(stream, self.pattern, filter=filter)

    def writer(self, stream):
        return Writer(stream, self.output)

    def __repr__(self):
        return "LogSource({0!r}, {1!r})".format(self.label, self.file)


def _get_option(conf, section, option, **kwargs):
    # patterns can be written on multiple lines
    s = conf.get(section, option, **kwargs)
    return s.replace("\r\n", "").replace("\n", "")


def _get_list(conf, section, option):
    s = _get_option(conf, section, option, fallback="")
    return [name.strip() for name in s.split(",") if name.strip()]


def load_from_config(fp):
    """Load log sources from configparser text file.

    Every source is described in a section named ``source:<name>``
    with following options.

    * file (mandatory): path of the log file.
    * format (mandatory): entry pattern of the log lines.
    * output (optional): output pattern.
    * label (optional): name displayed for the source.
    * lines (optional): number of lines read from the end of the file.

    The optional option ``sources`` in section ``general`` gives
    the names of the sources to load, in order.
    Relative file paths are resolved from the directory of the
    configuration file.

    Args:
        fp (str): file path of configparser text file.

    Returns:
        collections.OrderedDict: source name to :class:`LogSource`.

    Raises:
        configparser.Error: The configuration is malformed.
        PatternSyntaxError: A pattern is malformed.
    """
    # patterns include "%": no interpolation
    conf = configparser.ConfigParser(interpolation=None)
    with open(fp) as f:
        conf.read_file(f)

    names = _get_list(conf, SECTION_GENERAL, "sources")
    if not names:
        names = [section[len(SOURCE_PREFIX):] for section in conf.sections()
                 if section.startswith(SOURCE_PREFIX)]

    base = os.path.dirname(os.path.abspath(fp))
    sources = collections.OrderedDict()
    for name in names:
        section = SOURCE_PREFIX + name
        if not conf.has_section(section):
            raise configparser.NoSectionError(section)
        path = os.path.join(base, conf.get(section, "file"))
        sources[name] = LogSource(
            path,
            _get_option(conf, section, "format"),
            output=_get_option(conf, section, "output",
                               fallback=DEFAULT_OUTPUT),
            label=conf.get(section, "label", fallback=name),
            lines=conf.getint(section, "lines", fallback=0))
        _logger.debug("source %s loaded from %s", name, fp)
    return sources
