import argparse
import json
import sys
from collections.abc import Sequence
from typing import TextIO, cast

from texpand.diag import Diagnostic, FrontendError
from texpand.frontend import expand_source, read_sources
from texpand.options import DEFAULT_MAX_DEPTH, ExpanderOptions


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Expand backslash macros in text sources and print the result."
    )
    parser.add_argument(
        "sources",
        nargs="*",
        help="paths to source files, or - for stdin (default: read stdin)",
    )
    parser.add_argument("-I", dest="include_dirs", action="append", default=[], help="include path")
    parser.add_argument(
        "-D",
        dest="defines",
        action="append",
        default=[],
        help="define macro NAME=VALUE before expansion",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=DEFAULT_MAX_DEPTH,
        help="maximum expansion nesting depth",
    )
    parser.add_argument(
        "--keep-comment-indent",
        dest="strip_comment_indent",
        action="store_false",
        help="keep leading blanks on the line after a comment",
    )
    parser.add_argument(
        "--stream",
        dest="stream_output",
        action="store_true",
        help="write output as it is produced instead of after a successful run",
    )
    parser.add_argument(
        "--error-status",
        dest="error_exit_status",
        type=int,
        default=1,
        help="exit status reported on expansion errors",
    )
    parser.add_argument(
        "--diag-format",
        choices=("human", "json"),
        default="human",
        help="diagnostic output format",
    )
    parser.add_argument(
        "--dump-include-trace",
        action="store_true",
        help="print include resolution trace to stderr",
    )
    parser.add_argument(
        "--dump-macro-table",
        action="store_true",
        help="print final macro table to stderr",
    )
    return parser


def _print_diagnostic(diagnostic: Diagnostic, diag_format: str) -> None:
    if diag_format == "json":
        print(
            json.dumps(
                {
                    "stage": diagnostic.stage,
                    "filename": diagnostic.filename,
                    "code": diagnostic.code,
                    "message": diagnostic.message,
                },
                separators=(",", ":"),
            ),
            file=sys.stderr,
        )
    else:
        print(diagnostic, file=sys.stderr)


def main(argv: Sequence[str] | None = None, *, stdin: TextIO | None = None) -> int:
    parser = _build_arg_parser()
    effective_argv = list(argv) if argv is not None else sys.argv[1:]
    try:
        args = parser.parse_args(effective_argv)
    except SystemExit as error:
        return cast(int, error.code)
    try:
        options = ExpanderOptions(
            include_dirs=tuple(args.include_dirs),
            defines=tuple(args.defines),
            strip_comment_indent=args.strip_comment_indent,
            max_depth=args.max_depth,
            stream_output=args.stream_output,
            error_exit_status=args.error_exit_status,
            diag_format=args.diag_format,
        )
    except ValueError as error:
        print(f"texpand: {error}", file=sys.stderr)
        return 2
    try:
        filename, source = read_sources(
            args.sources, stdin=stdin, strip_indent=options.strip_comment_indent
        )
    except (OSError, UnicodeError) as error:
        print(f"texpand: I/O error: {error}", file=sys.stderr)
        return options.error_exit_status
    try:
        result = expand_source(
            source,
            filename=filename,
            options=options,
            stream=sys.stdout if options.stream_output else None,
        )
    except FrontendError as error:
        _print_diagnostic(error.diagnostic, options.diag_format)
        return options.error_exit_status
    sys.stdout.write(result.output)
    sys.stdout.flush()
    if args.dump_include_trace:
        for line in result.include_trace:
            print(line, file=sys.stderr)
    if args.dump_macro_table:
        for line in result.macro_table:
            print(line, file=sys.stderr)
    return 0
