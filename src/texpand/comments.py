import re

_COMMENT_RE = re.compile(r"(?<!\\)%[^\n]*\n?")
_COMMENT_WITH_INDENT_RE = re.compile(r"(?<!\\)%[^\n]*(?:\n[ \t]*)?")


def strip_comments(source: str, *, strip_indent: bool = True) -> str:
    """Remove ``%`` line comments, including the terminating newline.

    A ``%`` directly after a backslash is an escape, not a comment. With
    ``strip_indent`` the blanks and tabs opening the next line go too.
    """
    pattern = _COMMENT_WITH_INDENT_RE if strip_indent else _COMMENT_RE
    return pattern.sub("", source)
