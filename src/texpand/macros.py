import re
from dataclasses import dataclass

from texpand.diag import DuplicateMacroError, InvalidMacroNameError, UndefinedMacroError

BUILTIN_NAMES = frozenset({"def", "undef", "if", "ifdef", "include", "expandafter"})

_NAME_RE = re.compile(r"[A-Za-z0-9]+")


@dataclass(frozen=True)
class Macro:
    name: str
    value: str


def is_macro_name(name: str) -> bool:
    return _NAME_RE.fullmatch(name) is not None


def require_macro_name(name: str, *, context: str = "\\def") -> str:
    if not is_macro_name(name):
        raise InvalidMacroNameError(f"Invalid macro name in {context}: {name!r}")
    if name in BUILTIN_NAMES:
        raise InvalidMacroNameError(f"Cannot redefine builtin: {name}")
    return name


def parse_cli_define(define: str) -> Macro:
    name, _, value = define.partition("=")
    return Macro(require_macro_name(name, context="-D"), value)


class MacroTable:
    def __init__(self) -> None:
        self._macros: dict[str, Macro] = {}

    def define(self, name: str, value: str) -> Macro:
        require_macro_name(name)
        if name in self._macros:
            raise DuplicateMacroError(f"Macro already defined: {name}")
        macro = Macro(name, value)
        self._macros[name] = macro
        return macro

    def undefine(self, name: str) -> Macro:
        macro = self._macros.pop(name, None)
        if macro is None:
            raise UndefinedMacroError(f"Cannot undefine {name!r}: not defined")
        return macro

    def lookup(self, name: str) -> str | None:
        macro = self._macros.get(name)
        return None if macro is None else macro.value

    def clear(self) -> None:
        self._macros.clear()

    def lines(self) -> tuple[str, ...]:
        return tuple(f"{name}={macro.value}" for name, macro in sorted(self._macros.items()))

    def __contains__(self, name: object) -> bool:
        return name in self._macros
