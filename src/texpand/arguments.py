import re

from texpand.diag import MissingArgumentError, UnbalancedBracesError

_NAME_RE = re.compile(r"[A-Za-z0-9]*")
_SPACE_RE = re.compile(r"[ \t\n\r\f\v]*")


def read_name(text: str, index: int) -> tuple[str, int]:
    match = _NAME_RE.match(text, index)
    assert match is not None
    return match.group(0), match.end()


def skip_space(text: str, index: int) -> int:
    match = _SPACE_RE.match(text, index)
    assert match is not None
    return match.end()


def read_argument(text: str, index: int, *, skip_leading_space: bool = False) -> tuple[str, int]:
    if skip_leading_space:
        index = skip_space(text, index)
    if index >= len(text) or text[index] != "{":
        found = "end of input" if index >= len(text) else repr(text[index])
        raise MissingArgumentError(f"Expected '{{' to open an argument, found {found}")
    start = index + 1
    depth = 1
    escaped = False
    cursor = start
    while cursor < len(text):
        char = text[cursor]
        cursor += 1
        if escaped:
            escaped = False
        elif char == "\\":
            escaped = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start : cursor - 1], cursor
    raise UnbalancedBracesError("Unbalanced braces in argument")
