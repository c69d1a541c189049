from dataclasses import dataclass
from typing import Literal

DiagFormat = Literal["human", "json"]

DEFAULT_MAX_DEPTH = 1000


@dataclass(frozen=True)
class ExpanderOptions:
    include_dirs: tuple[str, ...] = ()
    defines: tuple[str, ...] = ()
    strip_comment_indent: bool = True
    max_depth: int = DEFAULT_MAX_DEPTH
    stream_output: bool = False
    error_exit_status: int = 1
    diag_format: DiagFormat = "human"

    def __post_init__(self) -> None:
        if self.max_depth < 1:
            raise ValueError(f"Maximum expansion depth must be positive: {self.max_depth}")
        if not 0 <= self.error_exit_status <= 255:
            raise ValueError(f"Unsupported exit status: {self.error_exit_status}")
        if self.diag_format not in {"human", "json"}:
            raise ValueError(f"Unsupported diagnostic format: {self.diag_format}")


def normalize_options(options: ExpanderOptions | None) -> ExpanderOptions:
    return ExpanderOptions() if options is None else options
