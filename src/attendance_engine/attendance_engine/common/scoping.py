"""Scope tags for query results.

Every report is tagged with the scope it was computed for (kind + the
parameters that selected it). A consumer whose selection changed while a
query was in flight compares the tag with its current scope and drops the
result when they differ.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Tuple

from .datetime_utils import to_iso_date


def _param_text(value: Any) -> str:
    if isinstance(value, date):
        return to_iso_date(value)
    if hasattr(value, "value"):
        return str(value.value)
    return str(value)


@dataclass(frozen=True)
class QueryScope:
    kind: str
    params: Tuple[Tuple[str, str], ...] = ()

    @classmethod
    def of(cls, kind: str, **params: Any) -> "QueryScope":
        items = tuple(sorted((k, _param_text(v)) for k, v in params.items() if v is not None))
        return cls(kind=kind, params=items)

    def to_dict(self) -> dict:
        return {"kind": self.kind, **dict(self.params)}


