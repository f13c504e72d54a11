"""Shareable game links: ``<site>#game:<gamePk>``."""

from __future__ import annotations

import re
from urllib.parse import urlsplit, urlunsplit

from .config import settings

_REFERENCE_PATTERN = re.compile(r"^game:(\d{10})")
_BARE_PK_PATTERN = re.compile(r"^\d{10}$")


def share_url(game_pk: int, base_url: str | None = None) -> str:
    """Build a link that opens ``game_pk`` directly."""
    parts = urlsplit(base_url or settings.share_base_url)
    return urlunsplit(parts._replace(fragment=f"game:{game_pk}"))


def parse_share_reference(text: str) -> int | None:
    """Extract the gamePk from a share link, a ``#game:`` fragment or a bare id."""
    text = text.strip()
    if _BARE_PK_PATTERN.match(text):
        return int(text)

    fragment = text.split("#", 1)[1] if "#" in text else text
    match = _REFERENCE_PATTERN.match(fragment)
    if not match:
        return None
    return int(match.group(1))
