"""URL-based deduplication of raw search-provider responses.

Works on the provider's raw mapping rather than on validated models so that
malformed payloads can be passed through untouched; validation happens later
in the fetcher.
"""

from __future__ import annotations

import re
from typing import Any

_TRAILING_SLASH = re.compile(r"/$")
_SCHEME = re.compile(r"^https?://")
_WWW = re.compile(r"^www\.")


def normalize_url(url: Any) -> str:
    """Return the dedup key for *url*.

    Trim, lowercase, drop one trailing slash, then a leading ``http(s)://``,
    then a leading ``www.``.  Never raises: a value that cannot be normalized
    is used as-is (stringified).
    """
    try:
        key = url.strip().lower()
        key = _TRAILING_SLASH.sub("", key)
        key = _SCHEME.sub("", key)
        return _WWW.sub("", key)
    except (AttributeError, TypeError):
        return str(url)


def deduplicate_response(response: Any) -> Any:
    """Drop repeated URLs from ``results`` and ``images``, keeping first occurrences.

    The two lists are deduplicated independently.  Entries without a URL are
    kept.  Anything without a ``results`` list is returned unchanged, and the
    input mapping itself is never mutated.
    """
    if not isinstance(response, dict) or not isinstance(response.get("results"), list):
        return response

    deduped = dict(response)
    deduped["results"] = _first_seen(response["results"])

    images = response.get("images")
    if isinstance(images, list):
        deduped["images"] = _first_seen(images)

    return deduped


def _first_seen(entries: list[Any]) -> list[Any]:
    seen: set[str] = set()
    kept: list[Any] = []
    for entry in entries:
        url = _entry_url(entry)
        if not url:
            kept.append(entry)
            continue
        key = normalize_url(url)
        if key in seen:
            continue
        seen.add(key)
        kept.append(entry)
    return kept


def _entry_url(entry: Any) -> Any:
    # Image lists may hold bare URL strings instead of objects.
    if isinstance(entry, str):
        return entry
    if isinstance(entry, dict):
        return entry.get("url")
    return None
