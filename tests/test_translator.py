from types import MappingProxyType

import pytest

from blog_summarizer.dictionary import get_dictionary
from blog_summarizer.translator import translate, translate_token

DICTIONARY = MappingProxyType(
    {
        "hello": "ہیلو",
        "world": "دنیا",
        "its": "اس",
        "web": "ویب",
        "development": "ترقی",
    }
)


def test_unknown_word_round_trips_unchanged():
    assert translate("xyz123.", DICTIONARY) == "xyz123."


def test_known_words_keep_trailing_punctuation():
    assert translate("Hello, World!", DICTIONARY) == "ہیلو, دنیا!"


def test_mid_word_punctuation_moves_to_end_of_translation():
    assert translate_token("it's", DICTIONARY) == "اس'"


def test_unknown_words_come_back_lowercased():
    assert translate("Modern WEB Development", DICTIONARY) == "modern ویب ترقی"


@pytest.mark.parametrize(
    "text",
    [
        "Hello world",
        "Web development, hello world! Unknown tokens stay.",
        "  leading and   trailing\twhitespace\n",
    ],
)
def test_token_count_and_order_are_preserved(text):
    source_tokens = text.lower().split()
    translated_tokens = translate(text, DICTIONARY).split()
    assert len(translated_tokens) == len(source_tokens)
    for source, target in zip(source_tokens, translated_tokens):
        assert target == translate_token(source, DICTIONARY)


def test_whitespace_runs_collapse_to_single_spaces():
    assert translate("one \n\t two", {}) == "one two"


def test_empty_text():
    assert translate("", DICTIONARY) == ""


def test_punctuation_only_token_is_kept():
    assert translate("hello -- world", DICTIONARY) == "ہیلو -- دنیا"


def test_packaged_dictionary_preserves_token_count():
    dictionary = get_dictionary()
    text = "About the web, for many developers with their most significant tools."

    translated = translate(text, dictionary)

    assert len(translated.split()) == len(text.split())
    assert translated.split()[0] == dictionary["about"]
    assert translated.split()[2] == "ویب,"


def test_accented_letters_travel_with_punctuation():
    assert translate_token("café.", {"caf": "کیف"}) == "کیفé."
