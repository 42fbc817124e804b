from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Union


def split_comma(value: Optional[str]) -> List[str]:
    """Split comma separated form text into a list of values.

    - "a, b,,c" => ["a", "b", "c"]
    - "" or None => []
    """
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v).strip() for v in value if str(v).strip()]
    return [s.strip() for s in str(value).split(",") if s.strip()]


def join_comma(values: Optional[Iterable]) -> str:
    if not values:
        return ""
    if isinstance(values, str):
        return values
    return ",".join(str(v) for v in values)


def split_command(value: Union[str, List[str], None]) -> List[str]:
    """Split newline separated command text into argv tokens.

    Each line is one token, so arguments containing spaces survive:
    "/bin/sh\\n-c\\necho hi" => ["/bin/sh", "-c", "echo hi"].
    Lists are passed through unchanged.
    """
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value]
    return [s.strip() for s in str(value).split("\n") if s.strip()]


def join_command(values: Optional[Iterable]) -> str:
    """Inverse of :func:`split_command`; absent or empty input gives ""."""
    if not values:
        return ""
    if isinstance(values, str):
        return values
    return "\n".join(str(v) for v in values)


def pairs_to_map(rows: Optional[Iterable]) -> Dict[str, str]:
    """Fold ordered key/value rows into a map, skipping half-filled rows."""
    out: Dict[str, str] = {}
    for row in rows or []:
        if row.key and row.value:
            out[row.key] = row.value
    return out
