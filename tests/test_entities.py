"""Tests for HTML entity decoding."""

import pytest

from tube2notes.entities import decode_html_entities


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Tom &amp; Jerry", "Tom & Jerry"),
        ("caf&eacute;", "café"),
        ("&lt;b&gt;", "<b>"),
        ("it&#39;s", "it's"),
        ("&#233;t&#233;", "été"),
        ("&#x27;quoted&#X27;", "'quoted'"),
        ("&quot;hi&quot;", '"hi"'),
        ("don&apos;t", "don't"),
    ],
)
def test_decodes_single_references(raw, expected):
    assert decode_html_entities(raw) == expected


def test_decodes_double_encoded_apostrophe():
    assert decode_html_entities("&amp;#39;") == "'"


def test_decodes_double_encoded_quote():
    assert decode_html_entities("he said &amp;quot;no&amp;quot;") == 'he said "no"'


def test_decodes_triple_encoded_apostrophe():
    assert decode_html_entities("I&amp;amp;#39;m here") == "I'm here"


def test_unknown_entity_is_left_alone():
    assert decode_html_entities("&notarealentity; stays") == "&notarealentity; stays"


def test_out_of_range_code_point_is_left_alone():
    assert decode_html_entities("bad &#99999999999; ref") == "bad &#99999999999; ref"


def test_bare_ampersand_is_untouched():
    assert decode_html_entities("AT&T and R&D") == "AT&T and R&D"


@pytest.mark.parametrize(
    "text",
    ["", "plain ascii text.", "Numbers 1:23 and symbols #;!", "multi\nline\ttext"],
)
def test_decoding_is_idempotent_on_plain_text(text):
    once = decode_html_entities(text)
    assert once == text
    assert decode_html_entities(once) == once


def test_joins_surrogate_pair_references():
    decoded = decode_html_entities("smile &#55357;&#56832; now &#xD83D;&#xDE00;")
    assert decoded == "smile \U0001F600 now \U0001F600"
    decoded.encode("utf-8")


@pytest.mark.parametrize("raw", ["lone &#55357; high", "lone &#56832; low", "at the end &#55357;"])
def test_lone_surrogate_becomes_replacement_character(raw):
    decoded = decode_html_entities(raw)
    assert "\ufffd" in decoded
    assert "&#" not in decoded
    decoded.encode("utf-8")
