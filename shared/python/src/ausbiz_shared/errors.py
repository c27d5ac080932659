"""
errors.py — error taxonomy shared by the pipeline and API.

  AusbizError
    AdapterError       — raised inside a source adapter, converted to a
      TransportError     FetchFailure at the adapter boundary
      SchemaError
    ValidationError    — a replacement breaks a Canonical Dataset invariant
    ExhaustedError     — every adapter in the chain failed (reported, never raised)
"""

from __future__ import annotations


class AusbizError(Exception):
    """Base class for all ausbiz errors."""

    def __init__(self, detail: str, *, source: str | None = None) -> None:
        self.detail = detail
        self.source = source
        message = f"{source}: {detail}" if source else detail
        super().__init__(message)


class AdapterError(AusbizError):
    """An upstream source could not produce a usable update."""


class TransportError(AdapterError):
    """Network or HTTP failure talking to an upstream API."""

    def __init__(
        self,
        detail: str,
        *,
        source: str | None = None,
        status_code: int | None = None,
    ) -> None:
        self.status_code = status_code
        super().__init__(detail, source=source)


class SchemaError(AdapterError):
    """The upstream payload did not have the expected shape."""


class ValidationError(AusbizError):
    """A series replacement would break a Canonical Dataset invariant."""

    def __init__(self, detail: str, *, series: str | None = None) -> None:
        self.series = series
        super().__init__(detail, source=series)


class ExhaustedError(AusbizError):
    """Every configured source failed or was disabled."""

    def __init__(self, attempted: list[str]) -> None:
        self.attempted = list(attempted)
        tried = ", ".join(self.attempted) or "none"
        super().__init__(f"all data sources unavailable (tried: {tried})")
