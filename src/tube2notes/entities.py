"""
HTML entity decoding for caption text.

Caption feeds are observed to double-encode entities (``&amp;#39;`` instead
of ``&#39;``), so decoding runs as a fixed sequence of passes where each pass
re-scans the output of the previous one.
"""

from __future__ import annotations

import re
from html.entities import html5

_NAMED_RE = re.compile(r"&([A-Za-z][A-Za-z0-9]*);")
_DECIMAL_RE = re.compile(r"&#(\d+);")
_HEX_RE = re.compile(r"&#x([0-9a-f]+);", flags=re.IGNORECASE)

# Residual quote/ampersand forms, including ones still wrapped in "&amp;"
_APOSTROPHE_RE = re.compile(r"&(?:amp;)*(?:apos|#0*39|#x0*27);", flags=re.IGNORECASE)
_QUOTE_RE = re.compile(r"&(?:amp;)*(?:quot|#0*34|#x0*22);", flags=re.IGNORECASE)
_AMPERSAND_RE = re.compile(r"&amp;", flags=re.IGNORECASE)
_SURROGATE_RE = re.compile("[\ud800-\udfff]")


def _named(match: re.Match) -> str:
    return html5.get(match.group(1) + ";", match.group(0))


def _code_point(value: int, original: str) -> str:
    try:
        return chr(value)
    except (ValueError, OverflowError):
        return original


def _decimal(match: re.Match) -> str:
    return _code_point(int(match.group(1), 10), match.group(0))


def _hex(match: re.Match) -> str:
    return _code_point(int(match.group(1), 16), match.group(0))


def _join_surrogates(text: str) -> str:
    """Combine UTF-16 surrogate pairs; a lone half becomes U+FFFD."""
    if not _SURROGATE_RE.search(text):
        return text
    return text.encode("utf-16-le", "surrogatepass").decode("utf-16-le", "replace")


def decode_html_entities(text: str) -> str:
    """
    Resolve character references in caption text.

    Passes, in order:
      1. named references (``&eacute;``) via the HTML5 entity table
      2. decimal references (``&#233;``)
      3. hexadecimal references (``&#xE9;``)
      4. apostrophe / quote / ampersand forms left over from nested encoding

    Unknown names and out-of-range code points are left as written, so the
    function never fails. Numeric references to surrogate pairs
    (``&#55357;&#56832;``) are joined into one character.

    Args:
        text: Raw caption text

    Returns:
        Text with entities resolved
    """
    decoded = _NAMED_RE.sub(_named, text)
    decoded = _DECIMAL_RE.sub(_decimal, decoded)
    decoded = _HEX_RE.sub(_hex, decoded)
    decoded = _join_surrogates(decoded)

    decoded = _APOSTROPHE_RE.sub("'", decoded)
    decoded = _QUOTE_RE.sub('"', decoded)
    decoded = _AMPERSAND_RE.sub("&", decoded)
    return decoded
