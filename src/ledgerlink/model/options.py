from __future__ import annotations

"""
Match options: per-run configuration of the linker.

resolve_match_options merges the caller's field overrides, the raw options
mapping and the defaults from ledgerlink.config into a validated MatchOptions.
It fails fast with ConfigurationError when no identifier can be resolved, so
that nothing is processed with an unusable configuration.
"""

from typing import Any, List, Mapping, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ledgerlink.config import DEFAULT_AMOUNT_DELTA, DEFAULT_DATE_DELTA


class ConfigurationError(ValueError):
    """Raised when the linker cannot be configured (e.g. no identifiers)."""


class MatchOptions(BaseModel):
    """Resolved options shared by the fetcher and both matchers.

    identifiers are lower-cased substrings searched for in operation labels.
    min_date_delta/max_date_delta are the days before/after the bill date that
    bound the candidate window; both default to date_delta.
    """

    identifiers: List[str] = Field(min_length=1)
    amount_delta: float = Field(default=DEFAULT_AMOUNT_DELTA, ge=0.0)
    date_delta: int = Field(default=DEFAULT_DATE_DELTA, ge=0)
    min_date_delta: Optional[int] = Field(default=None, ge=0)
    max_date_delta: Optional[int] = Field(default=None, ge=0)

    @field_validator("identifiers")
    @classmethod
    def _lowercase_identifiers(cls, value: List[str]) -> List[str]:
        return [identifier.lower() for identifier in value]

    @model_validator(mode="after")
    def _default_window_bounds(self) -> "MatchOptions":
        if self.min_date_delta is None:
            self.min_date_delta = self.date_delta
        if self.max_date_delta is None:
            self.max_date_delta = self.date_delta
        return self


def _resolve_identifiers(fields: Mapping[str, Any], options: Mapping[str, Any]) -> List[str]:
    # A custom bank identifier supplied by the user wins over configured ones
    custom = fields.get("bank_identifier")
    if isinstance(custom, str) and custom:
        return [custom.lower()]

    identifiers = options.get("identifiers")
    if isinstance(identifiers, str):
        return [identifiers.lower()]
    if isinstance(identifiers, (list, tuple)):
        if not all(isinstance(i, str) for i in identifiers):
            raise ConfigurationError("identifiers must be strings")
        return [i.lower() for i in identifiers]
    raise ConfigurationError('linking cannot be run without "identifiers" option')


def resolve_match_options(
    fields: Optional[Mapping[str, Any]] = None,
    options: Optional[Mapping[str, Any]] = None,
) -> MatchOptions:
    """Build MatchOptions from field overrides and raw options.

    Falsy numeric values (None or 0) fall back to the defaults: a zero
    date_delta or amount_delta is treated as unset.

    Raises:
        ConfigurationError: if no identifiers can be resolved, or if the
            resulting options are invalid.
    """
    fields = fields or {}
    options = options or {}

    identifiers = _resolve_identifiers(fields, options)
    if not identifiers:
        raise ConfigurationError('linking cannot be run without "identifiers" option')

    date_delta = options.get("date_delta") or DEFAULT_DATE_DELTA
    try:
        return MatchOptions(
            identifiers=identifiers,
            amount_delta=options.get("amount_delta") or DEFAULT_AMOUNT_DELTA,
            date_delta=date_delta,
            min_date_delta=options.get("min_date_delta") or date_delta,
            max_date_delta=options.get("max_date_delta") or date_delta,
        )
    except ValueError as exc:
        raise ConfigurationError(f"Invalid linking options: {exc}") from exc


__all__ = ["ConfigurationError", "MatchOptions", "resolve_match_options"]
