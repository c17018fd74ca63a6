import pytest

from blog_summarizer.summarizer import (
    NO_CONTENT_MESSAGE,
    is_degenerate,
    split_sentences,
    summarize,
)

FIRST = "The first sentence is clearly long enough here"
LONGEST = "This middle sentence is by far the longest sentence in the whole paragraph"
LAST = "The final sentence also has plenty of characters"


def test_first_longest_last_in_original_order():
    content = f"{FIRST}. {LONGEST}. {LAST}."
    assert summarize(content) == f"{FIRST}. {LONGEST}. {LAST}."


def test_longest_first_sentence_is_not_repeated():
    content = f"{LONGEST}. {FIRST}! {LAST}?"
    assert summarize(content) == f"{LONGEST}. {LAST}."


def test_single_sentence_reduces_to_itself():
    assert summarize("Only one sentence lives in this particular text") == (
        "Only one sentence lives in this particular text."
    )


def test_ties_keep_first_longest_sentence():
    content = (
        "Opening line that is long enough. "
        "Tie candidate number one is here now. "
        "Tie candidate number two is here now. "
        "Closing sentence of the sample."
    )
    assert summarize(content) == (
        "Opening line that is long enough. "
        "Tie candidate number one is here now. "
        "Closing sentence of the sample."
    )


def test_short_sentences_are_dropped():
    content = f"Short intro. {LONGEST}. Tiny end."
    assert summarize(content) == f"{LONGEST}."


def test_all_short_sentences_are_degenerate():
    summary = summarize("A. BB. CCC.")
    assert summary == "."
    assert is_degenerate(summary)


@pytest.mark.parametrize("content", ["", "   ", "...!!!???", "\n\t"])
def test_no_sentences_returns_fixed_message(content):
    assert summarize(content) == NO_CONTENT_MESSAGE


def test_runs_of_terminal_punctuation_split_once():
    sentences = split_sentences("Wait!!! Really?! Yes... done")
    assert [s.strip() for s in sentences] == ["Wait", "Really", "Yes", "done"]


def test_summary_of_summary_is_stable():
    summary = summarize(f"{FIRST}. Filler sentence here. {LONGEST}. {LAST}.")
    assert summarize(summary) == summary


def test_regular_summary_is_not_degenerate():
    assert not is_degenerate(summarize(f"{FIRST}. {LAST}."))
