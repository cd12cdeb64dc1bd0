# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Check Mate Contributors
"""
Check Mate CLI Module

Commands:
- segment <text>: Print extracted claims
- check <text>: Fact-check a text (API key from CHECKMATE_API_KEY)

Usage:
    python -m checkmate_cli segment "The U.S. economy grew by 3%. Dr. Smith confirmed it."
    CHECKMATE_API_KEY=sk-... python -m checkmate_cli check "The Earth is flat." --citations
"""

from checkmate_cli.check_cmd import main

__all__ = ["main"]
