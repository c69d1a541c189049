import sys
from collections.abc import Callable
from pathlib import Path

from texpand.arguments import read_argument, read_name
from texpand.comments import strip_comments
from texpand.diag import (
    ExpansionError,
    IncludeNotFoundError,
    IncludeReadError,
    InvalidMacroNameError,
    ResourceExhaustedError,
    UndefinedMacroError,
)
from texpand.macros import MacroTable, is_macro_name
from texpand.options import ExpanderOptions, normalize_options
from texpand.sink import CaptureSink, Sink

ESCAPABLE = frozenset("\\{}#%")

_Handler = Callable[[str, int, Sink], int]

# Interpreter frames one nesting level may use, with headroom.
_FRAMES_PER_LEVEL = 6


def instantiate(template: str, argument: str) -> str:
    out: list[str] = []
    index = 0
    length = len(template)
    while index < length:
        char = template[index]
        if char == "\\":
            if index + 1 >= length:
                out.append("\\")
                index += 1
                continue
            following = template[index + 1]
            if following in ESCAPABLE:
                out.append(following)
            else:
                out.append("\\" + following)
            index += 2
        elif char == "#":
            out.append(argument)
            index += 1
        else:
            out.append(char)
            index += 1
    return "".join(out)


class Expander:
    def __init__(
        self,
        table: MacroTable | None = None,
        options: ExpanderOptions | None = None,
        *,
        source: str = "<input>",
    ) -> None:
        self.table = MacroTable() if table is None else table
        self._options = normalize_options(options)
        self._depth = 0
        self._sources = [source]
        self.include_trace: list[str] = []
        self._builtins: dict[str, _Handler] = {
            "def": self._handle_def,
            "undef": self._handle_undef,
            "if": self._handle_if,
            "ifdef": self._handle_ifdef,
            "include": self._handle_include,
            "expandafter": self._handle_expandafter,
        }

    def expand(self, text: str, sink: Sink) -> None:
        if self._depth > 0:
            self._expand(text, sink)
            return
        limit = sys.getrecursionlimit()
        sys.setrecursionlimit(limit + self._options.max_depth * _FRAMES_PER_LEVEL)
        try:
            self._expand(text, sink)
        finally:
            sys.setrecursionlimit(limit)

    def _expand(self, text: str, sink: Sink) -> None:
        self._depth += 1
        try:
            if self._depth > self._options.max_depth:
                raise ResourceExhaustedError(
                    f"Expansion nested deeper than {self._options.max_depth} levels"
                )
            index = 0
            length = len(text)
            while index < length:
                slash = text.find("\\", index)
                if slash < 0:
                    sink.write(text[index:])
                    break
                sink.write(text[index:slash])
                index = self._expand_escape(text, slash + 1, sink)
        finally:
            self._depth -= 1

    def expand_to_string(self, text: str) -> str:
        capture = CaptureSink()
        self.expand(text, capture)
        return capture.getvalue()

    def _expand_escape(self, text: str, index: int, sink: Sink) -> int:
        if index >= len(text):
            sink.write("\\")
            return index
        char = text[index]
        if char in ESCAPABLE:
            sink.write(char)
            return index + 1
        if not is_macro_name(char):
            sink.write("\\" + char)
            return index + 1
        name, end = read_name(text, index)
        if end >= len(text) or text[end] != "{":
            sink.write("\\" + name)
            return end
        handler = self._builtins.get(name)
        if handler is not None:
            return handler(text, end, sink)
        return self._expand_user_macro(name, text, end, sink)

    def _expand_user_macro(self, name: str, text: str, index: int, sink: Sink) -> int:
        template = self.table.lookup(name)
        if template is None:
            raise UndefinedMacroError(f"Macro not defined: {name}")
        argument, index = read_argument(text, index)
        self.expand(instantiate(template, argument), sink)
        return index

    def _handle_def(self, text: str, index: int, sink: Sink) -> int:
        name, index = read_argument(text, index)
        value, index = read_argument(text, index, skip_leading_space=True)
        self.table.define(name, value)
        return index

    def _handle_undef(self, text: str, index: int, sink: Sink) -> int:
        name, index = read_argument(text, index)
        self.table.undefine(name)
        return index

    def _handle_if(self, text: str, index: int, sink: Sink) -> int:
        condition, index = read_argument(text, index)
        then_branch, index = read_argument(text, index, skip_leading_space=True)
        else_branch, index = read_argument(text, index, skip_leading_space=True)
        self.expand(then_branch if condition else else_branch, sink)
        return index

    def _handle_ifdef(self, text: str, index: int, sink: Sink) -> int:
        name, index = read_argument(text, index)
        if name and not is_macro_name(name):
            raise InvalidMacroNameError(f"Invalid macro name in \\ifdef: {name!r}")
        then_branch, index = read_argument(text, index, skip_leading_space=True)
        else_branch, index = read_argument(text, index, skip_leading_space=True)
        self.expand(then_branch if name in self.table else else_branch, sink)
        return index

    def _handle_include(self, text: str, index: int, sink: Sink) -> int:
        include_name, index = read_argument(text, index)
        include_path, source = self._load_include(include_name)
        self.include_trace.append(
            f"{self._sources[-1]}: \\include{{{include_name}}} -> {include_path}"
        )
        self._sources.append(include_path)
        try:
            self.expand(source, sink)
        except ExpansionError as error:
            if error.filename is None:
                error.filename = include_path
            raise
        finally:
            self._sources.pop()
        return index

    def _handle_expandafter(self, text: str, index: int, sink: Sink) -> int:
        before, index = read_argument(text, index)
        after, index = read_argument(text, index, skip_leading_space=True)
        self.expand(before + self.expand_to_string(after), sink)
        return index

    def _resolve_include(self, include_name: str) -> Path | None:
        candidates = [Path(include_name)]
        if not Path(include_name).is_absolute():
            candidates.extend(Path(root) / include_name for root in self._options.include_dirs)
        for candidate in candidates:
            if candidate.is_file():
                return candidate
        return None

    def _load_include(self, include_name: str) -> tuple[str, str]:
        include_path = self._resolve_include(include_name)
        if include_path is None:
            raise IncludeNotFoundError(f"Include not found: {include_name}")
        try:
            source = include_path.read_text(encoding="utf-8")
        except (OSError, UnicodeError) as error:
            raise IncludeReadError(f"Unable to read include: {include_name}: {error}") from error
        return str(include_path), strip_comments(
            source, strip_indent=self._options.strip_comment_indent
        )
