"""Fetch error raised at the source adapter boundary."""

from enum import StrEnum


class FetchErrorKind(StrEnum):
    """Why an upstream fetch failed."""

    TIMEOUT = "timeout"
    PARSE = "parse"
    UPSTREAM_REJECTED = "upstream_rejected"
    NETWORK = "network"


class FetchError(Exception):
    """The only error type a source adapter lets escape."""

    def __init__(
        self,
        kind: FetchErrorKind,
        message: str,
        source_name: str = "",
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.source_name = source_name
        self.status_code = status_code

    def __str__(self) -> str:
        prefix = f"{self.source_name}: " if self.source_name else ""
        return f"{prefix}{self.kind.value}: {self.args[0]}"
