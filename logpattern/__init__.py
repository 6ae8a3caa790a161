# coding: utf-8

"""Compile log format templates into line parsers and writers."""

__version__ = '0.1.0'

from ._common import Entry, LogPatternError, PatternSyntaxError, \
    PatternMismatch, StreamFailure
from .pattern import EntryPattern, compile_pattern
from .reader import Reader, compile_filter, compile_reader
from .writer import OutputPattern, Writer, compile_output, compile_writer
from .load import LogSource, load_from_config
