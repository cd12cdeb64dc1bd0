# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Check Mate Contributors
"""Plain-text rendering of an AnalysisResult for sharing or terminal output."""

from __future__ import annotations

from checkmate_core.schema.verdict import AnalysisResult, Verdict

SHARE_HEADER = "🔍 Check Mate Analysis"
SHARE_FOOTER = "Fact-checked with Check Mate"
SHARE_URL = "https://github.com/sreekaransrinath/checkmate"

_VERDICT_EMOJI = {
    Verdict.TRUE: "✅",
    Verdict.FALSE: "❌",
    Verdict.UNCLEAR: "❓",
}

_SUPERSCRIPT_DIGITS = str.maketrans("0123456789", "⁰¹²³⁴⁵⁶⁷⁸⁹")


def superscript(n: int | str) -> str:
    """Unicode superscript for a citation marker: 12 -> '¹²'."""
    return str(n).translate(_SUPERSCRIPT_DIGITS)


def format_results(result: AnalysisResult, *, with_citations: bool = False) -> str:
    lines: list[str] = [SHARE_HEADER, ""]

    for index, item in enumerate(result.verdicts, start=1):
        lines.append(f"{index}. {item.claim}")
        lines.append(f"{_VERDICT_EMOJI[item.verdict]} {item.verdict.value.capitalize()}")

        count = len(item.citations)
        if count:
            lines.append(f"📚 {count} citation{'s' if count != 1 else ''}")
            if with_citations:
                for n, citation in enumerate(item.citations, start=1):
                    label = citation.title or citation.url
                    lines.append(f"   {superscript(n)} {label} <{citation.url}>")

        lines.append("")

    lines.append(SHARE_FOOTER)
    lines.append(SHARE_URL)
    return "\n".join(lines)
