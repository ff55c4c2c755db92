"""Memory store for observations and inferences about other players."""

import logging
from copy import deepcopy
from typing import Final, Optional

from .. import keywords as kw
from ..config import Settings
from ..formatting import percent, seat
from ..models import (
    AllSpeeches,
    AllVotes,
    BoundedMemoryLog,
    GameContext,
    GameSnapshot,
    MemoryEntry,
    PlayerInfo,
    PlayerProfile,
    RoleDeduction,
    Speech,
    StrategyPlan,
    ThreatAssessment,
    Vote,
)
from ..models.game import speeches_by
from ..roles import Role
from ..types import MemorySource, MemoryType, PhaseType, PlayerId, Round
from .strategy import strategy_for

logger = logging.getLogger(__name__)

EMPTY_SUMMARY: Final[str] = "暂无重要记忆信息。"
SUMMARY_HEADER: Final[str] = "重要记忆信息:"

TEAMMATE_RELEVANCE_FACTOR: Final[float] = 0.7
MAX_DEDUCTION_CONFIDENCE: Final[float] = 0.8


class MemoryStore:
    """Per-agent memory of the game under a hard size cap.

    Speech and vote batches are turned into scored memory entries and
    per-player profiles. Queries rank entries by relevance × confidence.
    """

    def __init__(
        self,
        role: Role,
        player_id: PlayerId,
        teammates: Optional[list[PlayerId]] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or Settings()
        self.context = GameContext(role=role, player_id=player_id, teammates=list(teammates or []))
        self.log = BoundedMemoryLog(self.settings.memory_capacity, self.settings.memory_retain)
        self._profiles: dict[PlayerId, PlayerProfile] = {}

    def update_game_context(self, round: Round, phase: PhaseType):
        """Advance the clock used to stamp new entries."""
        self.context.current_round = round
        self.context.current_phase = phase

    # ===== Ingestion =====

    def record_speech(
        self, speech: Speech, all_speeches: AllSpeeches, alive_players: list[PlayerInfo]
    ) -> list[MemoryEntry]:
        """Analyze one speech and store what it reveals.

        Args:
            speech: The speech to analyze
            all_speeches: Every speech so far, used for contradiction checks
            alive_players: Current roster

        Returns:
            The entries added (speech analysis, plus a contradiction if found)
        """
        content = speech.content.lower()
        topics = [topic for topic, words in kw.SPEECH_TOPICS if kw.contains_any(content, words)]
        confidence = min(0.5 + 0.1 * len(topics), 1.0)
        summary = f"{seat(speech.player_id)}: {', '.join(topics) if topics else kw.GENERAL_SPEECH}"

        added = [
            self._add_entry(
                kind="speech_analysis",
                content=summary,
                confidence=confidence,
                relevance=self._speech_relevance(speech.player_id, topics),
                source="observation",
                player_id=speech.player_id,
            )
        ]

        profile = self._profile_for(speech.player_id)
        if topics:
            profile.behaviors.append(f"第{self.context.current_round}轮: {', '.join(topics)}")
        profile.last_updated = self.context.current_round

        contradictions = self._detect_contradictions(speech, all_speeches)
        if contradictions:
            profile.contradictions.extend(contradictions)
            logger.debug("Player %s contradicted themselves: %s", speech.player_id, contradictions)
            added.append(
                self._add_entry(
                    kind="contradiction",
                    content=f"检测到矛盾: {'; '.join(contradictions)}",
                    confidence=0.8,
                    relevance=self._scaled_relevance(speech.player_id, 0.9),
                    source="deduction",
                    player_id=speech.player_id,
                )
            )

        return added

    def record_voting_pattern(
        self, votes: list[Vote], all_votes: AllVotes, alive_players: list[PlayerInfo]
    ) -> list[MemoryEntry]:
        """Flag followers and scattered voters across the whole vote history.

        Only players with at least two votes are judged. Returns the entries added.
        """
        by_voter: dict[PlayerId, list[Vote]] = {}
        for round_number in sorted(all_votes):
            for vote in all_votes[round_number]:
                by_voter.setdefault(vote.voter_id, []).append(vote)

        added = []
        for voter_id, cast in by_voter.items():
            if len(cast) < 2:
                continue

            patterns = []
            if self._is_follower(cast, all_votes):
                patterns.append((kw.FOLLOWER_PATTERN, 0.6))
            if len({v.target_id for v in cast}) == len(cast):
                patterns.append((kw.SCATTER_PATTERN, 0.5))

            for description, confidence in patterns:
                added.append(
                    self._add_entry(
                        kind="vote_pattern",
                        content=description,
                        confidence=confidence,
                        relevance=self._scaled_relevance(voter_id, 0.8),
                        source="observation",
                        player_id=voter_id,
                    )
                )

        return added

    # ===== Inference =====

    def deduce_roles(
        self, alive_players: list[PlayerInfo], all_speeches: AllSpeeches, all_votes: AllVotes
    ) -> dict[PlayerId, RoleDeduction]:
        """Guess the role of every living player from what they said.

        Only guesses scoring above 0.3 are returned and remembered; the
        player's profile takes the guessed role.
        """
        deductions = {}
        for player in alive_players:
            if player.id == self.context.player_id:
                continue

            role, score = self._score_roles(player.id, all_speeches)
            if score <= 0.3:
                continue

            deduction = RoleDeduction(role=role, confidence=min(score, MAX_DEDUCTION_CONFIDENCE))
            deductions[player.id] = deduction

            profile = self._profile_for(player.id)
            profile.suspected_role = deduction.role
            profile.confidence = deduction.confidence
            profile.last_updated = self.context.current_round

            self._add_entry(
                kind="role_deduction",
                content=f"推断角色: {role.value} (置信度: {round(deduction.confidence, 2)})",
                confidence=deduction.confidence,
                relevance=self._scaled_relevance(player.id, 0.9),
                source="deduction",
                player_id=player.id,
            )

        if deductions:
            logger.debug("Deduced roles: %s", {p: d.role.value for p, d in deductions.items()})
        return deductions

    def generate_strategy(self, snapshot: GameSnapshot) -> StrategyPlan:
        """Pick the plan for this agent's role and remember it."""
        supporting = [entry.content for entry in self.relevant_entries()[:3]]
        alive_ids = {p.id for p in snapshot.alive_players if p.is_alive} or None

        plan = strategy_for(self.context.role).generate(self._profiles, alive_ids)
        plan.supporting_memories = supporting

        self._add_entry(
            kind="strategy",
            content=f"策略: {plan.primary_strategy} | 理由: {plan.reasoning}",
            confidence=0.7,
            relevance=1.0,
            source="deduction",
        )
        logger.info(
            "Player %s (%s) strategy: %s",
            self.context.player_id,
            self.context.role.value,
            plan.primary_strategy,
        )
        return plan

    # ===== Queries =====

    def summarize(self, max_entries: Optional[int] = None) -> str:
        """Format the most important memories, or a sentinel when none qualify."""
        if max_entries is None:
            max_entries = self.settings.summary_max_entries

        important = [e for e in self.log.ranked() if e.relevance > 0.6 and e.confidence > 0.5]
        important = important[:max_entries]

        if not important:
            return EMPTY_SUMMARY

        lines = [
            f"第{entry.round}轮: {entry.content} (置信度: {percent(entry.confidence)})"
            for entry in important
        ]
        return SUMMARY_HEADER + "\n" + "\n".join(lines)

    def threat_assessment(self) -> list[ThreatAssessment]:
        """Rank profiled players by how threatening they look."""
        threats = []
        for player_id, profile in self._profiles.items():
            if player_id == self.context.player_id:
                continue

            level = 0.0
            reasons = []

            if profile.suspected_role == Role.WEREWOLF and self.context.role != Role.WEREWOLF:
                level += 0.8
                reasons.append("疑似狼人")

            if len(profile.contradictions) > 2:
                level += 0.3
                reasons.append("发言矛盾")

            vote_patterns = self.log.by_kind("vote_pattern", player_id)
            if any(kw.contains_any(e.content, kw.VOTE_SUSPICION_MARKERS) for e in vote_patterns):
                level += 0.2
                reasons.append("投票行为可疑")

            if level > 0.3:
                threats.append(
                    ThreatAssessment(
                        player_id=player_id,
                        threat_level=min(level, 1.0),
                        reason=", ".join(reasons),
                    )
                )

        return sorted(threats, key=lambda t: t.threat_level, reverse=True)

    def relevant_entries(self, within_rounds: int = 3) -> list[MemoryEntry]:
        """Recent entries worth considering for the next decision, best first."""
        current = self.context.current_round
        return [
            e
            for e in self.log.ranked()
            if current - e.round <= within_rounds and e.relevance > 0.5 and e.confidence > 0.4
        ]

    def profile(self, player_id: PlayerId) -> Optional[PlayerProfile]:
        """Get a copy of a player's profile."""
        profile = self._profiles.get(player_id)
        return deepcopy(profile) if profile else None

    def profiles(self) -> dict[PlayerId, PlayerProfile]:
        """Get copies of all player profiles."""
        return deepcopy(self._profiles)

    def entries(self) -> tuple[MemoryEntry, ...]:
        """All stored entries in chronological order."""
        return tuple(self.log)

    def __len__(self) -> int:
        return len(self.log)

    # ===== Private helpers =====

    def _add_entry(
        self,
        kind: MemoryType,
        content: str,
        confidence: float,
        relevance: float,
        source: MemorySource,
        player_id: Optional[PlayerId] = None,
    ) -> MemoryEntry:
        entry = MemoryEntry.create(
            kind=kind,
            content=content,
            confidence=confidence,
            relevance=relevance,
            source=source,
            round=self.context.current_round,
            player_id=player_id,
        )
        evicted = self.log.append(entry)
        if evicted:
            logger.info(
                "Memory over capacity, evicted %d entries (%d kept)", len(evicted), len(self.log)
            )
        return entry

    def _profile_for(self, player_id: PlayerId) -> PlayerProfile:
        if player_id not in self._profiles:
            self._profiles[player_id] = PlayerProfile(
                player_id=player_id, last_updated=self.context.current_round
            )
        return self._profiles[player_id]

    def _scaled_relevance(self, player_id: Optional[PlayerId], relevance: float) -> float:
        """Teammates' behavior matters less as a threat signal."""
        if self.context.is_teammate(player_id):
            relevance *= TEAMMATE_RELEVANCE_FACTOR
        return min(relevance, 1.0)

    def _speech_relevance(self, player_id: PlayerId, topics: list[str]) -> float:
        relevance = self._scaled_relevance(player_id, 0.5)
        if any(topic in kw.CORE_TOPICS for topic in topics):
            relevance += 0.3
        return min(relevance, 1.0)

    def _detect_contradictions(self, speech: Speech, all_speeches: AllSpeeches) -> list[str]:
        current = speech.content.lower()
        found = []

        # Within its own round a speech only sees what was said before it
        same_round = all_speeches.get(speech.round, [])
        position = next((i for i, s in enumerate(same_round) if s is speech), len(same_round))
        earlier = [s for s in same_round[:position] if s.player_id == speech.player_id]
        prior = [
            s for s in speeches_by(speech.player_id, all_speeches) if s.round < speech.round
        ] + earlier

        for past in prior:
            if past.content == speech.content:
                continue
            previous = past.content.lower()

            for role_name in kw.CLAIMABLE_ROLES:
                claim = kw.ROLE_CLAIM.format(role=role_name)
                denial = kw.ROLE_DENIAL.format(role=role_name)
                if (claim in current and denial in previous) or (
                    denial in current and claim in previous
                ):
                    found.append("角色声明前后矛盾")

            if kw.INSPECTION in current and kw.INSPECTION in previous:
                found.append("查验结果可能矛盾")

        return found

    def _is_follower(self, cast: list[Vote], all_votes: AllVotes) -> bool:
        """More than 60% of the votes landed in the back half of their round."""
        late = 0
        for vote in cast:
            round_votes = all_votes.get(vote.round, [])
            position = next(
                (i for i, v in enumerate(round_votes) if v.voter_id == vote.voter_id), None
            )
            if position is not None and position > len(round_votes) / 2:
                late += 1
        return late > len(cast) * 0.6

    def _score_roles(self, player_id: PlayerId, all_speeches: AllSpeeches) -> tuple[Role, float]:
        scores = {Role.WEREWOLF: 0.0, Role.SEER: 0.0, Role.WITCH: 0.0, Role.VILLAGER: 0.0}

        for speech in speeches_by(player_id, all_speeches):
            content = speech.content.lower()
            if kw.contains_any(content, kw.SEER_CLUES):
                scores[Role.SEER] += 0.2
            if kw.contains_any(content, kw.WITCH_CLUES):
                scores[Role.WITCH] += 0.2
            if kw.contains_any(content, kw.VILLAGER_CLUES):
                scores[Role.VILLAGER] += 0.1
            if kw.contains_any(content, kw.WEREWOLF_CLUES):
                scores[Role.WEREWOLF] += 0.1

        profile = self._profiles.get(player_id)
        if profile and len(profile.contradictions) > 1:
            scores[Role.WEREWOLF] += 0.3

        # max() keeps the first of equal scores: werewolf, seer, witch, villager
        best = max(scores, key=scores.get)
        return best, scores[best]
