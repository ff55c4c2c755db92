"""Per-agent composition of memory, strategy and team coordination."""

import logging
from typing import Optional

from .config import Settings
from .models import (
    DayStrategy,
    GameSnapshot,
    RoleDeduction,
    StrategyPlan,
    TargetSuggestion,
    WerewolfCommunication,
    WerewolfTeamDecision,
)
from .roles import Role
from .services import CoordinationEngine, CoordinationError, MemoryStore, PromptContextBuilder
from .types import Level, PlayerId, Round

logger = logging.getLogger(__name__)


class AgentMind:
    """The reasoning state one player agent carries through a game.

    The server layer calls observe() whenever it hands over a new snapshot,
    then asks for prompt context at each decision point. Werewolves also
    get a coordination engine; for everyone else team operations raise
    CoordinationError.
    """

    def __init__(
        self,
        role: Role,
        player_id: PlayerId,
        teammates: Optional[list[PlayerId]] = None,
        settings: Optional[Settings] = None,
    ):
        self.role = role
        self.player_id = player_id
        self.teammates = list(teammates or []) if role == Role.WEREWOLF else []
        self.settings = settings or Settings()

        self.memory = MemoryStore(role, player_id, self.teammates, self.settings)
        self.coordination: Optional[CoordinationEngine] = None
        if role == Role.WEREWOLF:
            self.coordination = CoordinationEngine(role, player_id, self.teammates, self.settings)

        self.prompts = PromptContextBuilder()

        if self.teammates:
            logger.info("Player %s teammates: %s", player_id, self.teammates)

    def observe(self, snapshot: GameSnapshot):
        """Advance to the snapshot's round and absorb its speeches and votes."""
        self.memory.update_game_context(snapshot.round, snapshot.phase)

        for speech in snapshot.current_speeches():
            if speech.player_id != self.player_id:
                self.memory.record_speech(speech, snapshot.all_speeches, snapshot.alive_players)

        votes = snapshot.current_votes()
        if votes:
            self.memory.record_voting_pattern(votes, snapshot.all_votes, snapshot.alive_players)

    def prepare_vote(self, snapshot: GameSnapshot) -> dict[PlayerId, RoleDeduction]:
        """Refresh role deductions before voting."""
        return self.memory.deduce_roles(
            snapshot.alive_players, snapshot.all_speeches, snapshot.all_votes
        )

    def plan(self, snapshot: GameSnapshot) -> StrategyPlan:
        """Generate (and remember) the strategy for the current decision."""
        return self.memory.generate_strategy(snapshot)

    # ===== Prompt context =====

    def speech_context(self, snapshot: GameSnapshot) -> str:
        """Memory, threats and strategy for a speech prompt."""
        return self.prompts.build_speech_context(
            summary=self.memory.summarize(5),
            threats=self.memory.threat_assessment(),
            strategy=self.plan(snapshot),
        )

    def vote_context(self) -> str:
        """Top threat for a vote prompt."""
        return self.prompts.build_vote_context(self.memory.threat_assessment())

    def last_words_context(self) -> str:
        """Memory and main suspects for a last-words prompt."""
        return self.prompts.build_last_words_context(
            summary=self.memory.summarize(3),
            threats=self.memory.threat_assessment(),
        )

    # ===== Werewolf team =====

    def werewolf_communicate(
        self, snapshot: GameSnapshot, urgency: Level = "medium"
    ) -> WerewolfCommunication:
        """Produce this werewolf's night message to the team."""
        engine = self._team_engine()
        context = engine.build_context(
            snapshot.round,
            snapshot.alive_players,
            game_analysis=self.memory.summarize(),
            urgency=urgency,
        )
        return engine.generate_communication(
            self.player_id, context, snapshot.all_speeches, snapshot.all_votes
        )

    def decide_kill(
        self,
        snapshot: GameSnapshot,
        suggestions: list[TargetSuggestion | dict],
        urgency: Level = "medium",
    ) -> tuple[WerewolfTeamDecision, DayStrategy]:
        """Settle the team's kill target and the day cover that goes with it."""
        engine = self._team_engine()
        context = engine.build_context(
            snapshot.round,
            snapshot.alive_players,
            game_analysis=self.memory.summarize(),
            urgency=urgency,
        )
        decision = engine.negotiate_target(context, suggestions)
        return decision, engine.plan_day_strategy(context, decision)

    def team_context(self, round: Round, day_strategy: Optional[DayStrategy] = None) -> str:
        """Team messages of a round (and the day plan) for a werewolf prompt."""
        engine = self._team_engine()
        return self.prompts.build_team_context(
            self.player_id, engine.communication_history(round), day_strategy
        )

    def end_round(self, round: Round):
        """Let the team log forget old rounds."""
        if self.coordination is not None:
            self.coordination.cleanup(round)

    def _team_engine(self) -> CoordinationEngine:
        if self.coordination is None:
            raise CoordinationError(
                f"Only werewolves can talk to the team, player {self.player_id} is {self.role.value}"
            )
        return self.coordination
