"""Data models for game snapshots, agent memory and werewolf coordination."""

from .coordination import (
    DayStrategy,
    IndividualStrategy,
    TargetSuggestion,
    WerewolfCommunication,
    WerewolfCommunicationContext,
    WerewolfMessage,
    WerewolfTeamDecision,
)
from .game import AllSpeeches, AllVotes, GameContext, GameSnapshot, PlayerInfo, Speech, Vote
from .memory import (
    BoundedMemoryLog,
    MemoryEntry,
    PlayerProfile,
    RoleDeduction,
    StrategyPlan,
    ThreatAssessment,
)

__all__ = [
    "Speech",
    "Vote",
    "PlayerInfo",
    "AllSpeeches",
    "AllVotes",
    "GameContext",
    "GameSnapshot",
    "MemoryEntry",
    "BoundedMemoryLog",
    "PlayerProfile",
    "RoleDeduction",
    "ThreatAssessment",
    "StrategyPlan",
    "WerewolfMessage",
    "WerewolfTeamDecision",
    "WerewolfCommunicationContext",
    "TargetSuggestion",
    "WerewolfCommunication",
    "IndividualStrategy",
    "DayStrategy",
]
