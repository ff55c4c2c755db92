"""Werewolf team coordination: target negotiation, day cover and night messages."""

import logging
from dataclasses import dataclass, field
from typing import Final, Optional

from .. import keywords as kw
from ..config import Settings
from ..formatting import mentions_seat, seat
from ..models import (
    AllSpeeches,
    AllVotes,
    DayStrategy,
    IndividualStrategy,
    PlayerInfo,
    TargetSuggestion,
    WerewolfCommunication,
    WerewolfCommunicationContext,
    WerewolfMessage,
    WerewolfTeamDecision,
)
from ..roles import Role
from ..types import Level, PlayerId, Round

logger = logging.getLogger(__name__)

DEFAULT_REASON: Final[str] = "默认选择"

GOD_ROLE_RISK: Final[float] = 0.3
SUSPICION_RISK: Final[float] = 0.8
NEUTRAL_RISK: Final[float] = 0.5

COORDINATION_POINTS: Final[tuple[str, ...]] = (
    "避免同时投票给同一目标",
    "分散发言时间避免过于一致",
    "适当质疑队友制造假象",
)
HIGH_URGENCY_POINT: Final[str] = "优先保护核心成员"


class CoordinationError(ValueError):
    """Raised when team coordination is requested outside a set-up werewolf team."""


@dataclass
class TargetTally:
    """Support accumulated for one suggested target."""

    votes: int = 0
    total_priority: float = 0.0
    reasons: list[str] = field(default_factory=list)
    risk: float = NEUTRAL_RISK

    @property
    def score(self) -> float:
        return 0.4 * self.votes + 0.4 * self.total_priority + 0.2 * (1 - self.risk)


@dataclass
class SituationAnalysis:
    """What the werewolves can read from the public record."""

    threat_level: Level = "medium"
    suspicious_players: list[PlayerId] = field(default_factory=list)
    god_role_candidates: list[PlayerId] = field(default_factory=list)
    safe_players: list[PlayerId] = field(default_factory=list)
    urgent_actions: list[str] = field(default_factory=list)


class CoordinationEngine:
    """Coordinates the werewolf team from one member's point of view.

    Only usable by a werewolf whose team roster is known; every public
    operation raises CoordinationError otherwise.
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
        self.teammates: list[PlayerId] = list(teammates or [])
        self.settings = settings or Settings()
        self._messages: list[WerewolfMessage] = []
        self._history: dict[Round, list[WerewolfMessage]] = {}
        self._decisions: list[WerewolfTeamDecision] = []

    def setup_team(self, teammates: list[PlayerId]):
        """Set the werewolf roster once the game reveals it."""
        self.teammates = list(teammates)

    def build_context(
        self,
        round: Round,
        alive_players: list[PlayerInfo],
        game_analysis: str = "",
        urgency: Level = "medium",
    ) -> WerewolfCommunicationContext:
        """Derive the team's view of the roster for one negotiation or message."""
        self._require_team()
        alive_ids = [p.id for p in alive_players if p.is_alive]
        return WerewolfCommunicationContext(
            round=round,
            alive_players=alive_players,
            werewolf_team=list(self.teammates),
            alive_werewolves=[t for t in self.teammates if t in alive_ids],
            target_candidates=[
                pid for pid in alive_ids if pid not in self.teammates and pid != self.player_id
            ],
            game_analysis=game_analysis,
            urgency_level=urgency,
        )

    # ===== Team decisions =====

    def negotiate_target(
        self,
        context: WerewolfCommunicationContext,
        suggestions: list[TargetSuggestion | dict],
    ) -> WerewolfTeamDecision:
        """Merge member suggestions into one kill target.

        Each target is scored 0.4 × votes + 0.4 × total priority +
        0.2 × (1 − risk). The highest score wins and equal scores keep the
        target suggested first. Without suggestions the first legal
        candidate is chosen, then the first alive player.
        """
        self._require_team()
        tallies = self._tally_suggestions(suggestions)

        best_target: Optional[PlayerId] = None
        best_score: Optional[float] = None
        for target, tally in tallies.items():
            if best_score is None or tally.score > best_score:
                best_target, best_score = target, tally.score

        if best_target is None:
            best_target = self._fallback_target(context)

        tally = tallies.get(best_target)
        decision = WerewolfTeamDecision(
            target_player_id=best_target,
            reason="; ".join(tally.reasons) if tally else DEFAULT_REASON,
            consensus=tally.votes > len(context.alive_werewolves) / 2 if tally else False,
            participating_members=tuple(context.alive_werewolves),
            final_decision_maker=context.leader,
        )
        self._decisions.append(decision)

        logger.info(
            "Round %s team target: %s (consensus=%s, %d suggestions)",
            context.round,
            decision.target_player_id,
            decision.consensus,
            len(suggestions),
        )
        return decision

    def plan_day_strategy(
        self, context: WerewolfCommunicationContext, decision: WerewolfTeamDecision
    ) -> DayStrategy:
        """Give every alive werewolf a day-phase posture that hides the team."""
        self._require_team()
        high_urgency = context.urgency_level == "high"

        strategies = {}
        for werewolf_id in context.alive_werewolves:
            if werewolf_id == context.leader:
                speech = "适度引导讨论方向，不要过于主动"
                voting = "在投票中期参与，避免第一个投票"
            else:
                speech = "支持队友观点但不要过于明显"
                voting = "跟随大多数意见，偶尔表达不同看法"

            if high_urgency:
                speech += "，需要更加谨慎"
                voting += "，避免暴露关联"

            strategies[werewolf_id] = IndividualStrategy(
                speech_strategy=speech,
                voting_strategy=voting,
                risk_level=context.urgency_level,
            )

        points = list(COORDINATION_POINTS)
        if high_urgency:
            points.append(HIGH_URGENCY_POINT)

        return DayStrategy(
            overall_strategy=f"团队目标: 消除{seat(decision.target_player_id)}玩家，白天需要伪装成村民",
            individual_strategies=strategies,
            coordination_points=points,
        )

    # ===== Night communication =====

    def generate_communication(
        self,
        sender_id: PlayerId,
        context: WerewolfCommunicationContext,
        all_speeches: AllSpeeches,
        all_votes: AllVotes,
    ) -> WerewolfCommunication:
        """Produce this member's message to the team and log it."""
        self._require_team()
        analysis = self.analyze_situation(context, all_speeches, all_votes)

        if analysis.god_role_candidates:
            target = analysis.god_role_candidates[0]
            communication = WerewolfCommunication(
                message_type="target_suggestion",
                content=f"建议优先击杀{seat(target)}，疑似神职角色",
                priority="high",
                suggested_target=target,
                reasoning="消除神职角色威胁",
            )
        elif analysis.threat_level == "high":
            communication = WerewolfCommunication(
                message_type="coordination",
                content="我们被怀疑了，需要更好地伪装和配合",
                priority="high",
                reasoning="应对高威胁局势",
            )
        elif analysis.safe_players:
            target = analysis.safe_players[0]
            communication = WerewolfCommunication(
                message_type="target_suggestion",
                content=f"{seat(target)}相对安全，建议作为击杀目标",
                priority="medium",
                suggested_target=target,
                reasoning="选择风险较低的目标",
            )
        else:
            communication = WerewolfCommunication(
                message_type="strategy",
                content="需要仔细分析局势，寻找最佳击杀时机",
                priority="low",
                reasoning="常规策略讨论",
            )

        self._add_message(
            WerewolfMessage.create(
                sender_id=sender_id,
                content=communication.content,
                round=context.round,
                message_type=communication.message_type,
            )
        )
        return communication

    def analyze_situation(
        self,
        context: WerewolfCommunicationContext,
        all_speeches: AllSpeeches,
        all_votes: AllVotes,
    ) -> SituationAnalysis:
        """Scan speeches and votes for god roles, accusations and hostile voters."""
        analysis = SituationAnalysis()
        team = context.werewolf_team
        alive_ids = [p.id for p in context.alive_players if p.is_alive]
        dead_ids = {p.id for p in context.alive_players if not p.is_alive}

        for round_number in sorted(all_speeches):
            for speech in all_speeches[round_number]:
                if speech.player_id in team:
                    continue
                content = speech.content.lower()

                is_god_claim = kw.contains_any(content, kw.SEER_SIGNS) or kw.contains_any(
                    content, kw.WITCH_SIGNS
                )
                if (
                    is_god_claim
                    and speech.player_id not in dead_ids
                    and speech.player_id not in analysis.god_role_candidates
                ):
                    analysis.god_role_candidates.append(speech.player_id)

                if kw.WEREWOLF_MENTION in content and kw.contains_any(content, kw.ACCUSATION_SIGNS):
                    for werewolf_id in team:
                        if mentions_seat(content, werewolf_id):
                            analysis.threat_level = "high"
                            analysis.urgent_actions.append(
                                f"{seat(speech.player_id)}怀疑{seat(werewolf_id)}是狼人"
                            )

        for round_number in sorted(all_votes):
            for vote in all_votes[round_number]:
                if vote.target_id in team and vote.voter_id not in analysis.suspicious_players:
                    analysis.suspicious_players.append(vote.voter_id)

        analysis.safe_players = [
            pid
            for pid in alive_ids
            if pid not in team
            and pid not in analysis.god_role_candidates
            and pid not in analysis.suspicious_players
        ]

        if analysis.urgent_actions:
            logger.debug("Team under suspicion: %s", analysis.urgent_actions)
        return analysis

    # ===== History =====

    def communication_history(self, round: Optional[Round] = None) -> list[WerewolfMessage]:
        """Messages from one round, or every retained message."""
        if round is not None:
            return list(self._history.get(round, []))
        return list(self._messages)

    def team_decisions(self) -> list[WerewolfTeamDecision]:
        """Every decision made so far, oldest first."""
        return list(self._decisions)

    def cleanup(self, current_round: Round):
        """Forget messages more than the history window older than current_round."""
        window = self.settings.message_history_rounds
        before = len(self._messages)
        self._messages = [m for m in self._messages if current_round - m.round <= window]
        for round_number in [r for r in self._history if current_round - r > window]:
            del self._history[round_number]

        dropped = before - len(self._messages)
        if dropped:
            logger.debug("Dropped %d team messages before round %s", dropped, current_round)

    # ===== Private helpers =====

    def _require_team(self):
        if self.role != Role.WEREWOLF:
            raise CoordinationError(
                f"Only werewolves can coordinate, player {self.player_id} is {self.role.value}"
            )
        if not self.teammates:
            raise CoordinationError(
                f"Werewolf team for player {self.player_id} has not been set up"
            )

    def _tally_suggestions(
        self, suggestions: list[TargetSuggestion | dict]
    ) -> dict[PlayerId, TargetTally]:
        tallies: dict[PlayerId, TargetTally] = {}
        for raw in suggestions:
            # Raw dicts from the server layer are validated here
            suggestion = TargetSuggestion.model_validate(raw)
            tally = tallies.setdefault(suggestion.suggested_target, TargetTally())
            tally.votes += 1
            tally.total_priority += suggestion.priority
            tally.reasons.append(suggestion.reason)

        for tally in tallies.values():
            if any(kw.contains_any(r, kw.GOD_ROLE_REASONS) for r in tally.reasons):
                tally.risk = GOD_ROLE_RISK
            elif any(kw.contains_any(r, kw.SUSPICION_REASONS) for r in tally.reasons):
                tally.risk = SUSPICION_RISK
            else:
                tally.risk = NEUTRAL_RISK

        return tallies

    def _fallback_target(self, context: WerewolfCommunicationContext) -> PlayerId:
        if context.target_candidates:
            return context.target_candidates[0]
        for player in context.alive_players:
            if player.is_alive:
                return player.id
        raise CoordinationError(f"No target available in round {context.round}")

    def _add_message(self, message: WerewolfMessage):
        self._messages.append(message)
        self._history.setdefault(message.round, []).append(message)
