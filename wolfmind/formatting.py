"""Formatting utilities for analysis text and CLI output."""

import re


def percent(value: float) -> str:
    """Format a [0, 1] score as a whole percentage."""
    return f"{int(value * 100 + 0.5)}%"


def seat(player_id: int) -> str:
    """Format a player id the way players refer to seats (3号)."""
    return f"{player_id}号"


def mentions_seat(text: str, player_id: int) -> bool:
    """Check whether text names a seat, so 13号 does not count as 3号."""
    return re.search(rf"(?<!\d){re.escape(seat(player_id))}", text) is not None


def separator(width: int = 60) -> str:
    """Create a visual separator line."""
    return f"{'=' * width}"


def round_header(round_number: int) -> str:
    """Format a round header."""
    return f"{separator()}\n第{round_number}轮\n{separator()}"
