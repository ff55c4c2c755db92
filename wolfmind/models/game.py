"""Game snapshot models handed to the agent by the server layer."""

from dataclasses import dataclass, field
from typing import Optional

from ..roles import Role
from ..types import PhaseType, PlayerId, Round


@dataclass
class Speech:
    """A public statement made by a player."""

    player_id: PlayerId
    content: str
    round: Round

    def __repr__(self) -> str:
        preview = self.content[:30] + "..." if len(self.content) > 30 else self.content
        return f"Speech({self.player_id}号: {preview})"


@dataclass
class Vote:
    """A single day vote."""

    voter_id: PlayerId
    target_id: PlayerId
    round: Round

    def __repr__(self) -> str:
        return f"Vote({self.voter_id} → {self.target_id})"


@dataclass
class PlayerInfo:
    """A seat in the roster as seen by the agent."""

    id: PlayerId
    is_alive: bool = True
    role: Optional[Role] = None  # Only known for self and teammates


AllSpeeches = dict[Round, list[Speech]]
"""Speeches keyed by round, each list in speaking order."""

AllVotes = dict[Round, list[Vote]]
"""Votes keyed by round, each list in voting order."""


def speeches_by(player_id: PlayerId, all_speeches: AllSpeeches) -> list[Speech]:
    """Collect a player's speeches across all rounds in round order."""
    collected = []
    for round_number in sorted(all_speeches):
        collected.extend(s for s in all_speeches[round_number] if s.player_id == player_id)
    return collected


@dataclass
class GameContext:
    """What the agent knows about itself and the clock."""

    role: Role
    player_id: PlayerId
    teammates: list[PlayerId] = field(default_factory=list)
    current_round: Round = 1
    current_phase: PhaseType = "day"

    def is_teammate(self, player_id: Optional[PlayerId]) -> bool:
        """Check if a player is a declared teammate."""
        return player_id is not None and player_id in self.teammates


@dataclass
class GameSnapshot:
    """Everything the server layer passes in at one decision point."""

    round: Round
    phase: PhaseType
    alive_players: list[PlayerInfo] = field(default_factory=list)
    all_speeches: AllSpeeches = field(default_factory=dict)
    all_votes: AllVotes = field(default_factory=dict)

    def current_speeches(self) -> list[Speech]:
        """Speeches made in the snapshot's round."""
        return self.all_speeches.get(self.round, [])

    def current_votes(self) -> list[Vote]:
        """Votes cast in the snapshot's round."""
        return self.all_votes.get(self.round, [])
