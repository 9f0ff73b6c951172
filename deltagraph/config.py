"""Loader configuration with environment overrides."""

from __future__ import annotations

import os
from typing import Any, Dict


def _env_str(key: str, default: str) -> str:
    return str(os.getenv(key, default) or default).strip()


def _env_flag(key: str, default: bool) -> bool:
    raw = os.getenv(key)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(key: str, default: int) -> int:
    raw = os.getenv(key)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


CONFIG: Dict[str, Any] = {
    # Remote object storage (S3 compatible); paths become "<bucket>/<key>"
    "REMOTE_STORAGE": _env_flag("DELTAGRAPH_REMOTE_STORAGE", False),
    "REGION": _env_str("DELTAGRAPH_REGION", "us-east-2"),
    "S3_ENDPOINT": _env_str("DELTAGRAPH_S3_ENDPOINT", ""),
    # rdflib format used when the path extension says nothing
    "RDF_LANGUAGE": _env_str("DELTAGRAPH_RDF_LANGUAGE", "nt"),
    "OPTIMIZED_LOADING": _env_flag("DELTAGRAPH_OPTIMIZED_LOADING", False),
    # len("http://dbpedia.org/resource/") and len("http://imdb.org/")
    "DBPEDIA_PREFIX_LENGTH": _env_int("DELTAGRAPH_DBPEDIA_PREFIX_LENGTH", 28),
    "IMDB_PREFIX_LENGTH": _env_int("DELTAGRAPH_IMDB_PREFIX_LENGTH", 16),
    "LOG_LEVEL": _env_str("DELTAGRAPH_LOG_LEVEL", "INFO"),
}

RDF_EXTENSION_FORMATS = {
    "nt": "nt",
    "ttl": "turtle",
    "rdf": "xml",
    "owl": "xml",
    "jsonld": "json-ld",
    "json": "json-ld",
}
