"""Memory entry, player profile and analysis result models."""

import heapq
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import uuid4

from ..roles import Role
from ..types import Level, MemorySource, MemoryType, PlayerId, Round


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    """Clamp a score into [low, high]."""
    return max(low, min(high, value))


@dataclass(frozen=True)
class MemoryEntry:
    """One observation or inference about the game."""

    id: str
    created_at: datetime
    round: Round
    kind: MemoryType
    content: str
    confidence: float
    relevance: float
    source: MemorySource
    player_id: Optional[PlayerId] = None

    def __post_init__(self):
        object.__setattr__(self, "confidence", clamp(self.confidence))
        object.__setattr__(self, "relevance", clamp(self.relevance))

    @classmethod
    def create(
        cls,
        kind: MemoryType,
        content: str,
        confidence: float,
        relevance: float,
        source: MemorySource,
        round: Round,
        player_id: Optional[PlayerId] = None,
    ) -> "MemoryEntry":
        """Factory method to create an entry with auto-generated ID and timestamp."""
        return cls(
            id=str(uuid4()),
            created_at=datetime.now(),
            round=round,
            kind=kind,
            content=content,
            confidence=confidence,
            relevance=relevance,
            source=source,
            player_id=player_id,
        )

    @property
    def score(self) -> float:
        """Importance used for ranking and eviction."""
        return self.relevance * self.confidence

    def __repr__(self) -> str:
        return f"MemoryEntry({self.kind}, round {self.round}, score {self.score:.2f})"


class BoundedMemoryLog:
    """Chronological entry log with a hard capacity.

    When an append pushes the log past capacity, only the ``retain`` highest
    scoring entries survive. Equal scores keep the older entry.
    """

    def __init__(self, capacity: int = 100, retain: int = 80):
        if retain > capacity:
            raise ValueError(f"retain ({retain}) cannot exceed capacity ({capacity})")
        self.capacity = capacity
        self.retain = retain
        self._entries: list[MemoryEntry] = []

    def append(self, entry: MemoryEntry) -> list[MemoryEntry]:
        """Add an entry and return whatever was evicted to respect the capacity."""
        self._entries.append(entry)
        if len(self._entries) <= self.capacity:
            return []

        # nlargest is stable, so ties resolve to insertion order
        survivors = heapq.nlargest(
            self.retain, enumerate(self._entries), key=lambda pair: pair[1].score
        )
        kept = {index for index, _ in survivors}
        evicted = [e for i, e in enumerate(self._entries) if i not in kept]
        self._entries = [e for i, e in enumerate(self._entries) if i in kept]
        return evicted

    def ranked(self) -> list[MemoryEntry]:
        """Entries ordered by score, highest first."""
        return sorted(self._entries, key=lambda e: e.score, reverse=True)

    def by_kind(self, kind: MemoryType, player_id: Optional[PlayerId] = None) -> list[MemoryEntry]:
        """Entries of one kind, optionally about one player."""
        return [
            e
            for e in self._entries
            if e.kind == kind and (player_id is None or e.player_id == player_id)
        ]

    def __iter__(self):
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


@dataclass
class PlayerProfile:
    """Running assessment of another player."""

    player_id: PlayerId
    suspected_role: Optional[Role] = None
    confidence: float = 0.0
    behaviors: list[str] = field(default_factory=list)
    contradictions: list[str] = field(default_factory=list)
    alliances: list[PlayerId] = field(default_factory=list)
    threats: list[PlayerId] = field(default_factory=list)
    last_updated: Round = 1

    def __repr__(self) -> str:
        role = self.suspected_role.value if self.suspected_role else "unknown"
        return f"PlayerProfile({self.player_id}号, {role}, {len(self.contradictions)} contradictions)"


@dataclass(frozen=True)
class RoleDeduction:
    """Most likely role for a player."""

    role: Role
    confidence: float


@dataclass(frozen=True)
class ThreatAssessment:
    """How dangerous a player looks to this agent."""

    player_id: PlayerId
    threat_level: float
    reason: str


@dataclass
class StrategyPlan:
    """Role-specific plan for the next decision."""

    primary_strategy: str
    reasoning: str
    target_players: list[PlayerId] = field(default_factory=list)
    risk_level: Level = "medium"
    supporting_memories: list[str] = field(default_factory=list)
