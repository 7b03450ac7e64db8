"""Rendering of the static query-builder page served at ``GET /``."""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path

_TEMPLATE_PATH = Path(__file__).resolve().parent.parent / "static" / "query_builder.html"


@lru_cache(maxsize=1)
def _load_template() -> str:
    return _TEMPLATE_PATH.read_text(encoding="utf-8")


def _script_literal(value: object) -> str:
    # Keeps "</script>" and friends from closing the inline script.
    return json.dumps(value).replace("<", "\\u003c").replace(">", "\\u003e")


def render_query_builder(base_url: str, source_keys: list[str]) -> str:
    """Return the page HTML for *base_url* listing *source_keys* as chips."""
    api_url = f"{base_url}?term={{term}}&reading={{reading}}"
    return (
        _load_template()
        .replace("__AVAILABLE_SOURCES__", _script_literal(source_keys))
        .replace("__BASE_API_URL__", _script_literal(api_url))
    )
