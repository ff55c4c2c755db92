"""Memory and werewolf team coordination for AI werewolf agents."""

from .agent import AgentMind
from .config import Settings, load_settings
from .roles import Role
from .services import CoordinationEngine, CoordinationError, MemoryStore

__all__ = [
    "AgentMind",
    "MemoryStore",
    "CoordinationEngine",
    "CoordinationError",
    "Role",
    "Settings",
    "load_settings",
]
