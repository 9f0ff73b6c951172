"""Generic helpers (URI normalization, profiling, logging setup)."""

from __future__ import annotations

import functools
import logging
import time
from typing import Optional, Tuple

from deltagraph.config import CONFIG

logging.basicConfig(
    level=getattr(logging, str(CONFIG["LOG_LEVEL"]).upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(message)s",
)


def profile_time(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.time()
        result = func(*args, **kwargs)
        elapsed = time.time() - start_time
        logging.info("[PROFILE] Function '%s' executed in %.3f seconds", func.__name__, elapsed)
        return result

    return wrapper


def local_name(uri: str) -> str:
    """Return the local name of an IRI (after the last # or /), or '' if there is none."""
    if not isinstance(uri, str) or not uri:
        return ""
    s = uri.strip()
    if "#" in s:
        return s.rsplit("#", 1)[-1]
    if "/" in s:
        return s.rsplit("/", 1)[-1]
    if ":" in s:
        return s.split(":", 1)[-1]
    return s


def strip_prefix(uri: str, prefix_length: int) -> str:
    """Lowercase a URI and drop its first `prefix_length` characters when it is longer."""
    text = uri.lower()
    if prefix_length > 0 and len(text) > prefix_length:
        return text[prefix_length:]
    return text


def split_typed_id(uri: str, prefix_length: int) -> Optional[Tuple[str, str]]:
    """Split a '<type>/<id>' suffix; None unless there are exactly two segments.

    Trailing slashes are ignored, so 'actor/nm1/' splits like 'actor/nm1'.
    """
    parts = strip_prefix(uri, prefix_length).rstrip("/").split("/")
    if len(parts) != 2:
        return None
    vertex_type, vertex_id = parts
    if not vertex_type or not vertex_id:
        return None
    return vertex_type, vertex_id
