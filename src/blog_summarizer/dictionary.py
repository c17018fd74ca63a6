"""Load the static word list used for word-by-word translation."""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

from loguru import logger

from .config import get_settings
from .schema import data_dir, validate_dictionary_payload

TranslationDictionary = Mapping[str, str]


def default_dictionary_path() -> Path:
    """Packaged English to Urdu list, overridable via DICTIONARY_PATH."""
    settings = get_settings()
    if settings.dictionary_path:
        return Path(settings.dictionary_path).expanduser().resolve()
    return data_dir() / "urdu_dictionary.json"


def build_dictionary(payload: dict) -> TranslationDictionary:
    """
    Turn a validated word-list document into a read-only lookup table.

    Keys are lowercased; when two entries collapse to the same key the later
    one wins.
    """
    validated = validate_dictionary_payload(payload)
    table: dict[str, str] = {}
    for entry in validated["words"]:
        table[entry["englishWord"].lower()] = entry["targetWord"]
    return MappingProxyType(table)


def load_dictionary(path: Optional[Path | str] = None) -> TranslationDictionary:
    source = Path(path) if path else default_dictionary_path()
    payload = json.loads(source.read_text(encoding="utf-8"))
    dictionary = build_dictionary(payload)
    logger.debug(f"Loaded {len(dictionary)} dictionary entries from {source}")
    return dictionary


@lru_cache(maxsize=1)
def get_dictionary() -> TranslationDictionary:
    """Return the process-wide dictionary, loading it on first use."""
    return load_dictionary()
