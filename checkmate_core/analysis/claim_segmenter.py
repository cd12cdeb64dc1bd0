# Copyright (C) 2025 Check Mate Contributors
#
# This file is part of Check Mate Engine.
#
# Check Mate Engine is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""
Claim Segmenter

Splits short free-form text into candidate factual claims using sentence
boundary heuristics only:

- A terminator (. ! ?) ends a sentence only when followed by whitespace or
  end of input. Closing quotes/brackets right after it stay with the sentence.
- Abbreviation guard: "Dr.", "U.S.", "Jan.", "e.g." ... never end a sentence.
- Decimal guard: a terminator right after "digits.digits" never ends a
  sentence. "Inflation fell to 2.5. Prices rose." is therefore one claim.

Fragments shorter than MIN_CLAIM_CHARS are dropped. When more than
MAX_CLAIMS remain, the longest ones are kept in reading order.
"""

from __future__ import annotations

import re

from checkmate_core.utils.text_processing import normalize_whitespace

MAX_CLAIMS = 5
MIN_CLAIM_CHARS = 10

TERMINATORS = frozenset(".!?")
_CLOSERS = frozenset("\"')]}”’»")
_OPENERS = "\"'([{“‘«"

_DECIMAL_TAIL = re.compile(r"\d+\.\d+$")

ABBREVIATIONS: frozenset[str] = frozenset(
    a.lower()
    for a in (
        # Honorifics and titles
        "Mr.", "Mrs.", "Ms.", "Dr.", "Prof.", "Sr.", "Jr.", "St.", "Rev.",
        "Gen.", "Col.", "Capt.", "Lt.", "Sgt.", "Gov.", "Sen.", "Rep.", "Hon.", "Pres.",
        # Countries and organisations
        "U.S.", "U.S.A.", "U.K.", "U.N.", "E.U.", "D.C.",
        "Inc.", "Ltd.", "Corp.", "Co.", "Dept.", "Univ.",
        # Months
        "Jan.", "Feb.", "Mar.", "Apr.", "Jun.", "Jul.", "Aug.",
        "Sep.", "Sept.", "Oct.", "Nov.", "Dec.",
        # Latin
        "e.g.", "i.e.", "etc.", "vs.", "cf.", "approx.", "ca.",
    )
)


def _trailing_word(buffer: str) -> str:
    word = buffer.rsplit(" ", 1)[-1]
    return word.lstrip(_OPENERS).lower()


def _is_suppressed(buffer: str, body: str) -> bool:
    """
    buffer: text accumulated so far, including the terminator.
    body: the same text without the terminator.
    """
    if _trailing_word(buffer) in ABBREVIATIONS:
        return True
    if _DECIMAL_TAIL.search(body):
        return True
    return False


def split_sentences(text: str) -> list[str]:
    """Split normalized text into trimmed sentence candidates (no filtering)."""
    s = normalize_whitespace(text)
    if not s:
        return []

    out: list[str] = []
    buf: list[str] = []
    n = len(s)
    i = 0
    while i < n:
        ch = s[i]
        buf.append(ch)
        i += 1
        if ch not in TERMINATORS:
            continue

        j = i
        while j < n and s[j] in _CLOSERS:
            j += 1
        if j < n and not s[j].isspace():
            # Terminator inside a token: "U.S", "3.14", "example.com".
            continue

        current = "".join(buf)
        if _is_suppressed(current, current[:-1]):
            continue

        buf.extend(s[i:j])
        i = j
        sentence = "".join(buf).strip()
        if sentence:
            out.append(sentence)
        buf = []
        while i < n and s[i].isspace():
            i += 1

    tail = "".join(buf).strip()
    if tail:
        out.append(tail)
    return out


def select_claims(
    candidates: list[str],
    *,
    max_claims: int = MAX_CLAIMS,
    min_chars: int = MIN_CLAIM_CHARS,
) -> list[str]:
    """Drop short fragments, then keep the `max_claims` longest in original order."""
    kept = [c for c in candidates if len(c) >= min_chars]
    if len(kept) <= max_claims:
        return kept

    ranked = sorted(range(len(kept)), key=lambda idx: (-len(kept[idx]), idx))
    chosen = sorted(ranked[:max_claims])
    return [kept[idx] for idx in chosen]


def segment(
    text: str,
    *,
    max_claims: int = MAX_CLAIMS,
    min_chars: int = MIN_CLAIM_CHARS,
) -> list[str]:
    """
    Split text into at most `max_claims` claims of at least `min_chars` characters.

    Example:
        >>> segment("The U.S. economy grew by 3%. Dr. Smith confirmed it.")
        ['The U.S. economy grew by 3%.', 'Dr. Smith confirmed it.']
    """
    return select_claims(split_sentences(text), max_claims=max_claims, min_chars=min_chars)
