from dataclasses import dataclass

DUPLICATE_MACRO = "TXP-0101"
UNDEFINED_MACRO = "TXP-0102"
INVALID_MACRO_NAME = "TXP-0103"
UNBALANCED_BRACES = "TXP-0201"
MISSING_ARGUMENT = "TXP-0202"
INCLUDE_NOT_FOUND = "TXP-0301"
INCLUDE_READ_ERROR = "TXP-0302"
RESOURCE_EXHAUSTED = "TXP-0401"


@dataclass(frozen=True)
class Diagnostic:
    stage: str
    filename: str
    message: str
    code: str | None = None

    def __str__(self) -> str:
        if self.code is None:
            return f"{self.filename}: {self.stage}: {self.message}"
        return f"{self.filename}: {self.stage}: {self.message} [{self.code}]"


class ExpansionError(ValueError):
    code = "TXP-0000"

    def __init__(self, message: str, *, filename: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.filename = filename


class DuplicateMacroError(ExpansionError):
    code = DUPLICATE_MACRO


class UndefinedMacroError(ExpansionError):
    code = UNDEFINED_MACRO


class InvalidMacroNameError(ExpansionError):
    code = INVALID_MACRO_NAME


class UnbalancedBracesError(ExpansionError):
    code = UNBALANCED_BRACES


class MissingArgumentError(ExpansionError):
    code = MISSING_ARGUMENT


class IncludeNotFoundError(ExpansionError):
    code = INCLUDE_NOT_FOUND


class IncludeReadError(ExpansionError):
    code = INCLUDE_READ_ERROR


class ResourceExhaustedError(ExpansionError):
    code = RESOURCE_EXHAUSTED


class FrontendError(ValueError):
    def __init__(self, diagnostic: Diagnostic) -> None:
        super().__init__(str(diagnostic))
        self.diagnostic = diagnostic
