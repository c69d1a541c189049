import sys
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from texpand.comments import strip_comments
from texpand.diag import Diagnostic, ExpansionError, FrontendError, ResourceExhaustedError
from texpand.engine import Expander
from texpand.macros import MacroTable, parse_cli_define
from texpand.options import ExpanderOptions, normalize_options
from texpand.sink import CaptureSink, Sink, StreamSink


@dataclass(frozen=True)
class ExpandResult:
    filename: str
    output: str
    include_trace: tuple[str, ...]
    macro_table: tuple[str, ...]


def read_source(path: str, *, stdin: TextIO | None = None) -> tuple[str, str]:
    if path == "-":
        stream = sys.stdin if stdin is None else stdin
        return "<stdin>", stream.read()
    resolved = Path(path)
    return str(resolved), resolved.read_text(encoding="utf-8")


def read_sources(
    paths: Sequence[str],
    *,
    stdin: TextIO | None = None,
    strip_indent: bool = True,
) -> tuple[str, str]:
    if not paths:
        paths = ["-"]
    names: list[str] = []
    chunks: list[str] = []
    for path in paths:
        filename, source = read_source(path, stdin=stdin)
        names.append(filename)
        chunks.append(strip_comments(source, strip_indent=strip_indent))
    filename = names[0] if len(names) == 1 else "<input>"
    return filename, "".join(chunks)


def _diagnostic(error: ExpansionError, filename: str) -> Diagnostic:
    source = filename if error.filename is None else error.filename
    return Diagnostic("expand", source, error.message, error.code)


def expand_source(
    source: str,
    *,
    filename: str = "<input>",
    options: ExpanderOptions | None = None,
    stream: TextIO | None = None,
) -> ExpandResult:
    normalized_options = normalize_options(options)
    table = MacroTable()
    expander = Expander(table, normalized_options, source=filename)
    sink: Sink
    capture: CaptureSink | None = None
    if stream is None:
        capture = CaptureSink()
        sink = capture
    else:
        sink = StreamSink(stream)
    try:
        try:
            for define in normalized_options.defines:
                macro = parse_cli_define(define)
                table.define(macro.name, macro.value)
            expander.expand(source, sink)
        except RecursionError as error:
            raise ResourceExhaustedError("Expansion exceeded the interpreter stack") from error
        macro_table = table.lines()
    except ExpansionError as error:
        raise FrontendError(_diagnostic(error, filename)) from error
    finally:
        table.clear()
    output = "" if capture is None else capture.getvalue()
    return ExpandResult(filename, output, tuple(expander.include_trace), macro_table)


def expand_paths(
    paths: Sequence[str],
    *,
    options: ExpanderOptions | None = None,
    stdin: TextIO | None = None,
) -> ExpandResult:
    normalized_options = normalize_options(options)
    filename, source = read_sources(
        paths, stdin=stdin, strip_indent=normalized_options.strip_comment_indent
    )
    return expand_source(source, filename=filename, options=normalized_options)
