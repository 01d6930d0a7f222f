from __future__ import annotations

import unicodedata


def collation_key(value: str) -> str:
    """Case- and accent-insensitive sort key ("Émile" sorts with "emile")."""
    decomposed = unicodedata.normalize("NFD", value or "")
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.casefold()


def matches_search(query: str, *fields: str) -> bool:
    needle = collation_key(query.strip())
    if not needle:
        return True
    return any(needle in collation_key(f or "") for f in fields)
