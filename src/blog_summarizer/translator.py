"""Word-by-word dictionary substitution with punctuation carried along."""

from __future__ import annotations

import re
from typing import Mapping

# ASCII word characters only; accented letters travel with the punctuation.
_NON_WORD = re.compile(r"[^\w]", re.ASCII)


def translate_token(token: str, dictionary: Mapping[str, str]) -> str:
    """
    Translate one lowercased token.

    When the token's letters are in the dictionary, every non-word character
    of the token is collected in order and appended after the translation, so
    "it's," becomes "<translation of its>',". Unknown tokens are returned
    exactly as given.
    """
    clean = _NON_WORD.sub("", token)
    translation = dictionary.get(clean)
    if not translation:
        return token
    return translation + "".join(_NON_WORD.findall(token))


def translate(text: str, dictionary: Mapping[str, str]) -> str:
    """Lowercase ``text``, split on whitespace, and substitute known words."""
    tokens = text.lower().split()
    return " ".join(translate_token(token, dictionary) for token in tokens)
