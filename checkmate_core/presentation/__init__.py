from checkmate_core.presentation.badge import Badge, badge_for
from checkmate_core.presentation.share_text import format_results, superscript

__all__ = ["Badge", "badge_for", "format_results", "superscript"]
