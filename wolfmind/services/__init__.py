"""Service layer for agent memory, strategy and werewolf coordination."""

from .coordination_engine import CoordinationEngine, CoordinationError, SituationAnalysis
from .memory_store import MemoryStore
from .prompt_context import PromptContextBuilder
from .strategy import RoleStrategy, strategy_for

__all__ = [
    "MemoryStore",
    "CoordinationEngine",
    "CoordinationError",
    "SituationAnalysis",
    "PromptContextBuilder",
    "RoleStrategy",
    "strategy_for",
]
