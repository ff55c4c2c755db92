"""Type definitions shared by the memory and coordination components."""

from typing import Literal

PlayerId = int
"""Seat number of a player."""

Round = int
"""Game round, starting at 1."""

PhaseType = Literal["preparing", "night", "day", "voting", "ended"]
"""Valid game phases."""

MemoryType = Literal[
    "speech_analysis",
    "vote_pattern",
    "role_deduction",
    "strategy",
    "contradiction",
]
"""Kinds of memory entries."""

MemorySource = Literal["observation", "deduction", "interaction"]
"""Where a memory entry came from."""

MessageType = Literal["strategy", "target_suggestion", "information", "coordination"]
"""Types of werewolf team messages."""

Level = Literal["low", "medium", "high"]
"""Urgency, risk and priority levels."""
