"""Response normalization helpers shared by every provider adapter.

Providers disagree on field names (``link`` vs ``url``, ``snippet`` vs
``description`` vs ``content``) and on how related searches are encoded.
These helpers absorb the differences and enforce the result invariants:
at most ``count`` results, positions contiguous from 1, missing fields as
empty strings.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any
from urllib.parse import urlsplit

from serprelay.models.response import NormalizedResult


def extract_domain(url: Any) -> str:
    """Return the host of *url* with a leading ``www.`` removed.

    Fails soft: anything that is not an absolute URL yields ``""``.

    Examples:
        >>> extract_domain("https://www.example.com/path")
        'example.com'
        >>> extract_domain("not a url")
        ''
    """
    if not isinstance(url, str) or not url.strip():
        return ""
    try:
        parts = urlsplit(url.strip())
        host = parts.hostname
    except ValueError:
        return ""
    if not parts.scheme or not host:
        return ""
    return host.removeprefix("www.")


def first_text(item: dict[str, Any], *keys: str) -> str:
    """Return the first non-empty string value among *keys*, else ``""``."""
    for key in keys:
        value = item.get(key)
        if isinstance(value, str) and value:
            return value
    return ""


def normalize_results(
    items: Iterable[Any],
    count: int,
    *,
    url_keys: Sequence[str] = ("url",),
    snippet_keys: Sequence[str] = ("snippet",),
    date_keys: Sequence[str] = ("date",),
) -> list[NormalizedResult]:
    """Map raw provider items to ranked ``NormalizedResult`` objects.

    Non-dict items are dropped. The output is truncated to *count* and
    numbered from 1 after truncation, so positions never have gaps.
    """
    results: list[NormalizedResult] = []
    for item in items:
        if len(results) >= count:
            break
        if not isinstance(item, dict):
            continue
        url = first_text(item, *url_keys)
        results.append(
            NormalizedResult(
                position=len(results) + 1,
                title=first_text(item, "title"),
                url=url,
                snippet=first_text(item, *snippet_keys),
                domain=extract_domain(url),
                date=first_text(item, *date_keys) or None,
            )
        )
    return results


def normalize_related(values: Any) -> list[str]:
    """Flatten related-search suggestions.

    Accepts plain strings or ``{"query": ...}`` objects; anything else is
    skipped.
    """
    if not isinstance(values, list):
        return []
    related: list[str] = []
    for value in values:
        if isinstance(value, str):
            text = value
        elif isinstance(value, dict):
            text = first_text(value, "query")
        else:
            continue
        if text:
            related.append(text)
    return related


def as_list(value: Any) -> list[Any]:
    """Return *value* if it is a list, otherwise an empty list."""
    return value if isinstance(value, list) else []


def normalize_questions(values: Any) -> list[str]:
    """Flatten "people also ask" entries (strings or ``{"question": ...}``)."""
    if not isinstance(values, list):
        return []
    questions: list[str] = []
    for value in values:
        if isinstance(value, str):
            text = value
        elif isinstance(value, dict):
            text = first_text(value, "question")
        else:
            continue
        if text:
            questions.append(text)
    return questions


def as_int(value: Any) -> int | None:
    """Coerce a provider count such as ``1230000`` or ``"1,230,000"``; else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        digits = value.replace(",", "").strip()
        if digits.isdigit():
            return int(digits)
    return None


def as_float(value: Any) -> float | None:
    """Coerce a provider timing such as ``0.42`` or ``"0.42"``; else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None
