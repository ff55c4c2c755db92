"""Context building service for LLM prompts."""

from ..formatting import percent, seat
from ..models import DayStrategy, StrategyPlan, ThreatAssessment, WerewolfMessage
from ..types import PlayerId
from . import prompt_templates as templates


class PromptContextBuilder:
    """Turns memory and coordination outputs into prompt text.

    Works on plain values handed over by the caller, never on the live
    memory store or coordination engine.
    """

    def build_speech_context(
        self,
        summary: str,
        threats: list[ThreatAssessment],
        strategy: StrategyPlan,
        max_threats: int = 3,
    ) -> str:
        """Build the block appended to a speech prompt.

        Args:
        ----
            summary: Memory summary text
            threats: Threat list, most threatening first
            strategy: Current strategy plan
            max_threats: How many threats to mention

        Returns:
        -------
            Formatted context string

        """
        parts = [templates.MEMORY_SECTION.format(summary=summary)]

        if threats:
            items = [
                templates.THREAT_ITEM.format(
                    seat=seat(t.player_id), level=percent(t.threat_level), reason=t.reason
                )
                for t in threats[:max_threats]
            ]
            parts.append(templates.THREAT_SECTION.format(threats="; ".join(items)))

        parts.append(
            templates.STRATEGY_SECTION.format(
                primary=strategy.primary_strategy, reasoning=strategy.reasoning
            )
        )
        parts.append(templates.SPEECH_LENGTH_HINT)
        return "".join(parts)

    def build_vote_context(self, threats: list[ThreatAssessment]) -> str:
        """Build the block appended to a vote prompt (top threat only)."""
        if not threats:
            return ""
        top = threats[0]
        return templates.TOP_THREAT_SECTION.format(
            seat=seat(top.player_id), level=percent(top.threat_level), reason=top.reason
        )

    def build_last_words_context(
        self, summary: str, threats: list[ThreatAssessment], max_suspects: int = 2
    ) -> str:
        """Build the block appended to a last-words prompt."""
        parts = [templates.MEMORY_SECTION.format(summary=summary)]
        if threats:
            suspects = [
                templates.SUSPECT_ITEM.format(seat=seat(t.player_id), level=percent(t.threat_level))
                for t in threats[:max_suspects]
            ]
            parts.append(templates.SUSPECTS_SECTION.format(suspects=", ".join(suspects)))
        return "".join(parts)

    def build_team_context(
        self,
        player_id: PlayerId,
        messages: list[WerewolfMessage],
        day_strategy: DayStrategy | None = None,
    ) -> str:
        """Build the werewolf-only block: team messages and this member's day plan."""
        parts = []
        if messages:
            lines = [f"{seat(m.sender_id)}: {m.content}" for m in messages]
            parts.append(templates.TEAM_MESSAGES_SECTION.format(messages="\n".join(lines)))

        if day_strategy and player_id in day_strategy.individual_strategies:
            mine = day_strategy.individual_strategies[player_id]
            parts.append(
                templates.TEAM_PLAN_SECTION.format(
                    overall=day_strategy.overall_strategy,
                    speech=mine.speech_strategy,
                    voting=mine.voting_strategy,
                    points="；".join(day_strategy.coordination_points),
                )
            )
        return "".join(parts)
