"""Werewolf team communication and decision models."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field

from ..types import Level, MessageType, PlayerId, Round
from .game import PlayerInfo


@dataclass
class WerewolfMessage:
    """A message exchanged inside the werewolf team."""

    id: str
    sender_id: PlayerId
    content: str
    timestamp: datetime
    round: Round
    message_type: MessageType

    @classmethod
    def create(
        cls, sender_id: PlayerId, content: str, round: Round, message_type: MessageType
    ) -> "WerewolfMessage":
        """Factory method to create a message with auto-generated ID."""
        return cls(
            id=str(uuid4()),
            sender_id=sender_id,
            content=content,
            timestamp=datetime.now(),
            round=round,
            message_type=message_type,
        )


@dataclass(frozen=True)
class WerewolfTeamDecision:
    """Outcome of a kill-target negotiation."""

    target_player_id: PlayerId
    reason: str
    consensus: bool
    participating_members: tuple[PlayerId, ...]
    final_decision_maker: Optional[PlayerId]


@dataclass
class WerewolfCommunicationContext:
    """Situation handed to the team for one negotiation or message."""

    round: Round
    alive_players: list[PlayerInfo]
    werewolf_team: list[PlayerId]
    alive_werewolves: list[PlayerId]
    target_candidates: list[PlayerId]
    game_analysis: str = ""
    urgency_level: Level = "medium"

    @property
    def leader(self) -> Optional[PlayerId]:
        """The alive werewolf who speaks for the team."""
        return self.alive_werewolves[0] if self.alive_werewolves else None


class TargetSuggestion(BaseModel):
    """Schema for one member's kill-target suggestion."""
    member_id: PlayerId = Field(description="Werewolf making the suggestion")
    suggested_target: PlayerId = Field(description="Player the member wants to kill")
    reason: str = Field(default="", description="Free-text justification")
    priority: float = Field(default=1.0, description="How strongly the member backs this target")


class WerewolfCommunication(BaseModel):
    """Schema for the message one werewolf sends to the team."""
    message_type: MessageType
    content: str
    priority: Level
    suggested_target: Optional[PlayerId] = None
    reasoning: str = ""

    def to_response(self) -> dict:
        """Fields exposed in the player API response."""
        return self.model_dump(include={"message_type", "content", "suggested_target"})


@dataclass
class IndividualStrategy:
    """Day-phase guidance for one werewolf."""

    speech_strategy: str
    voting_strategy: str
    risk_level: Level


@dataclass
class DayStrategy:
    """Day-phase plan for the whole team."""

    overall_strategy: str
    individual_strategies: dict[PlayerId, IndividualStrategy] = field(default_factory=dict)
    coordination_points: list[str] = field(default_factory=list)
