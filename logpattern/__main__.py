#!/usr/bin/env python

import configparser
import logging
import sys

import click

from ._common import PatternSyntaxError, StreamFailure
from .reader import strip_line_feed

_logger = logging.getLogger(__name__)


def text_postprocess(line):
    return strip_line_feed(line)


def bin_postprocess(line, encoding="utf-8"):
    return strip_line_feed(line.decode(encoding))


def iter_lines(files, encoding="utf-8"):
    if len(files) == 0:
        for line in sys.stdin:
            yield text_postprocess(line)
    else:
        for fp in files:
            if ".tar." in fp:
                import tarfile
                with tarfile.open(fp, 'r') as tar:
                    for info in tar.getmembers():
                        if info.isfile():
                            with tar.extractfile(info) as f:
                                for line in f:
                                    yield bin_postprocess(line, encoding=encoding)
            elif fp.endswith(".bz2"):
                import bz2
                with bz2.open(fp, 'rt', encoding=encoding) as f:
                    for line in f:
                        yield text_postprocess(line)
            elif fp.endswith(".gz"):
                import gzip
                with gzip.open(fp, 'rt', encoding=encoding) as f:
                    for line in f:
                        yield text_postprocess(line)
            else:
                with open(fp, 'rt', encoding=encoding) as f:
                    for line in f:
                        yield text_postprocess(line)


def format_entry(index, entry):
    return "{0}: {1}".format(index, entry.as_dict())


def select_patterns(input_pattern, output_pattern, preset, config, source):
    """Get files, input and output patterns from the options.
    Explicit patterns take priority over the preset and the config source.
    """
    from .preset import DEFAULT_INPUT, DEFAULT_OUTPUT, get_preset

    files = []
    default_input, default_output = DEFAULT_INPUT, DEFAULT_OUTPUT
    if config:
        from .load import load_from_config
        sources = load_from_config(config)
        if source is None:
            if len(sources) == 0:
                raise click.BadParameter("no source in configuration",
                                         param_hint="--config")
            source = next(iter(sources))
        if source not in sources:
            raise click.BadParameter("unknown source {0}".format(source),
                                     param_hint="--source")
        src = sources[source]
        files = [src.file]
        default_input = src.pattern.pattern
        default_output = src.output.pattern
    elif preset:
        try:
            default_input, default_output = get_preset(preset)
        except KeyError as e:
            raise click.BadParameter(e.args[0], param_hint="--preset")

    return (files,
            input_pattern or default_input,
            output_pattern or default_output)


@click.command()
@click.argument("files", nargs=-1,
                type=click.Path(exists=True, dir_okay=False))
@click.option("--input", "-i", "input_pattern", default=None,
              help="entry pattern of input lines")
@click.option("--output", "-o", "output_pattern", default=None,
              help="output pattern")
@click.option("--preset", "-p", default=None,
              help="name of preset patterns")
@click.option("--config", "-c", default=None,
              type=click.Path(exists=True, dir_okay=False),
              help="configuration file of log sources")
@click.option("--source", "-s", default=None,
              help="source name in the configuration file")
@click.option("--type", "-t", "format_type", default="text",
              type=click.Choice(["text", "object"]),
              help="output format type")
@click.option("--encoding", default="utf-8",
              help="encoding to load input data")
@click.option("--verbose", "-v", is_flag=True,
              help="verbose output to stderr")
def main(files, input_pattern, output_pattern, preset, config, source,
         format_type, encoding, verbose):
    """Parse log entries in FILES (or stdin if FILES not given)
    and print them with an output pattern."""

    if verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr)

    from .reader import Reader
    from .writer import Writer

    try:
        config_files, input_pattern, output_pattern = select_patterns(
            input_pattern, output_pattern, preset, config, source)
        files = list(files) or config_files
        reader = Reader(iter_lines(files, encoding=encoding), input_pattern)
        writer = Writer(sys.stdout, output_pattern)
    except PatternSyntaxError as e:
        raise click.ClickException("invalid pattern: {0}".format(e))
    except configparser.Error as e:
        raise click.ClickException("invalid configuration: {0}".format(e))

    try:
        for index, entry in enumerate(reader, 1):
            if format_type == "object":
                click.echo(format_entry(index, entry))
            else:
                writer.write(entry)
    except StreamFailure as e:
        raise click.ClickException(str(e))
    _logger.debug("%d lines read", reader.lineno)


if __name__ == "__main__":
    main()
