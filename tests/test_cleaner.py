"""Tests for transcript cleaning."""

import re

import pytest

from tube2notes import cleaner
from tube2notes.cleaner import CLEANING_PASSES, clean_transcript, join_captions


def _words(text):
    return re.findall(r"[a-z']+", text.lower())


def test_removes_timestamp_tokens():
    cleaned = clean_transcript("Hello [1:23] world (4:56) 7:08 end")
    assert not re.search(r"\d:\d", cleaned)
    assert cleaned == "Hello world end"


def test_collapses_stutter():
    cleaned = clean_transcript("the the cat cat sat")
    words = _words(cleaned)
    assert all(a != b for a, b in zip(words, words[1:]))
    assert cleaned == "The cat sat"


def test_collapses_stutter_runs_and_punctuated_repeats():
    assert cleaner.collapse_stutter("we we we went") == "we went"
    assert cleaner.collapse_stutter("yes, yes I did") == "yes I did"
    assert cleaner.collapse_stutter("The the end") == "The end"


def test_stutter_does_not_touch_word_prefixes():
    assert cleaner.collapse_stutter("the theme") == "the theme"


def test_end_to_end_example():
    cleaned = clean_transcript("um so the the cat [0:01] sat on the mat you know")
    words = _words(cleaned)
    assert "um" not in words
    assert "so" not in words
    assert "you know" not in cleaned.lower()
    assert "0:01" not in cleaned
    assert all(a != b for a, b in zip(words, words[1:]))
    assert cleaned == "The cat sat on the mat"


@pytest.mark.parametrize(
    "filler",
    ["um", "uh", "like", "so", "you know", "i mean", "basically", "actually",
     "literally", "right", "okay", "well"],
)
def test_removes_each_filler(filler):
    cleaned = cleaner.remove_fillers(f"we {filler} went home")
    assert cleaned == "we went home"


def test_filler_removal_respects_word_boundaries():
    assert cleaner.remove_fillers("summer likely wellness") == "summer likely wellness"


def test_joins_dotted_acronyms():
    assert cleaner.join_acronyms("the M. C. P. server") == "the MCP server"
    assert cleaner.join_acronyms("the M.C.P. server") == "the MCP server"


def test_collapses_repeated_punctuation():
    assert cleaner.collapse_repeated_punctuation("wait!!! what?.. ok,,") == "wait! what? ok,"


def test_normalizes_punctuation_spacing():
    assert cleaner.normalize_punctuation_spacing("one ,two .three") == "one, two. three"


def test_inserts_sentence_break_before_capitalized_word():
    assert cleaner.insert_sentence_breaks("we met Alice") == "we met. Alice"


def test_capitalizes_standalone_i():
    assert cleaner.capitalize_pronoun_i("then i said it is mine ") == "then I said it is mine"


def test_capitalizes_sentence_starts_and_keeps_terminators():
    assert cleaner.capitalize_sentences("hello there. how are you? fine!") == (
        "Hello there. How are you? Fine!"
    )


def test_leaves_all_caps_first_word_untouched():
    assert cleaner.capitalize_sentences("NASA launched. it flew.") == "NASA launched. It flew."


def test_final_cleanup_collapses_periods():
    assert cleaner.final_cleanup(" done..  next.   ") == "done. next."


def test_decodes_entities_before_cleaning():
    assert clean_transcript("it&amp;#39;s a dog") == "It's a dog"


def test_collapses_newlines_and_runs_of_spaces():
    assert clean_transcript("first line\n\n  second   line") == "First line second line"


def test_empty_input():
    assert clean_transcript("") == ""
    assert clean_transcript("   \n ") == ""


def test_pass_order_is_fixed():
    names = [name for name, _ in CLEANING_PASSES]
    assert names == [
        "collapse_whitespace",
        "strip_timestamps",
        "collapse_stutter",
        "remove_fillers",
        "join_acronyms",
        "collapse_repeated_punctuation",
        "normalize_punctuation_spacing",
        "insert_sentence_breaks",
        "capitalize_pronoun_i",
        "capitalize_sentences",
        "final_cleanup",
    ]


def test_join_captions_space_joins_in_order():
    assert join_captions(["one", "two", "three"]) == "one two three"
