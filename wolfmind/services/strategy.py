"""Role-specific strategy heuristics."""

from abc import ABC, abstractmethod
from typing import Final

from ..models import PlayerProfile, StrategyPlan
from ..roles import Role
from ..types import Level, PlayerId

MAX_TARGETS: Final[int] = 2


class RoleStrategy(ABC):
    """Base class for the strategy of one role.

    Each variant has a fixed plan and picks its targets from the player
    profiles the memory store has built so far.
    """

    primary_strategy: str
    reasoning: str
    risk_level: Level

    @abstractmethod
    def is_target(self, profile: PlayerProfile) -> bool:
        """Whether a profiled player belongs in this role's target list."""

    def generate(
        self,
        profiles: dict[PlayerId, PlayerProfile],
        alive_ids: set[PlayerId] | None = None,
    ) -> StrategyPlan:
        """Build the plan, limiting targets to living players when a roster is known."""
        targets = [
            player_id
            for player_id, profile in profiles.items()
            if self.is_target(profile) and (alive_ids is None or player_id in alive_ids)
        ]
        return StrategyPlan(
            primary_strategy=self.primary_strategy,
            reasoning=self.reasoning,
            target_players=targets[:MAX_TARGETS],
            risk_level=self.risk_level,
        )


class WerewolfStrategy(RoleStrategy):
    primary_strategy = "伪装村民，寻找神职目标"
    reasoning = "作为狼人需要隐藏身份并消除威胁"
    risk_level = "medium"

    def is_target(self, profile: PlayerProfile) -> bool:
        return profile.suspected_role in (Role.SEER, Role.WITCH)


class SeerStrategy(RoleStrategy):
    primary_strategy = "适时公布查验结果，引导投票"
    reasoning = "作为预言家需要在保护自己的同时传达信息"
    risk_level = "high"

    def is_target(self, profile: PlayerProfile) -> bool:
        return profile.suspected_role == Role.WEREWOLF


class WitchStrategy(RoleStrategy):
    primary_strategy = "隐藏身份，关键时刻使用药水"
    reasoning = "作为女巫需要在合适时机使用能力"
    risk_level = "low"

    def is_target(self, profile: PlayerProfile) -> bool:
        return False


class VillagerStrategy(RoleStrategy):
    primary_strategy = "分析发言，寻找逻辑漏洞"
    reasoning = "作为村民需要通过逻辑分析找出狼人"
    risk_level = "low"

    def is_target(self, profile: PlayerProfile) -> bool:
        return len(profile.contradictions) > 1


STRATEGIES: Final[dict[Role, type[RoleStrategy]]] = {
    Role.WEREWOLF: WerewolfStrategy,
    Role.SEER: SeerStrategy,
    Role.WITCH: WitchStrategy,
    Role.VILLAGER: VillagerStrategy,
    Role.HUNTER: VillagerStrategy,
    Role.GUARD: VillagerStrategy,
}


def strategy_for(role: Role) -> RoleStrategy:
    """Select the strategy variant for a role."""
    if role not in STRATEGIES:
        raise ValueError(f"No strategy for role: {role}")
    return STRATEGIES[role]()
