"""Tunable settings for the memory store and team coordination."""

import os
from dataclasses import dataclass

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    """Limits and defaults shared by the per-agent components."""

    memory_capacity: int = 100
    memory_retain: int = 80
    message_history_rounds: int = 3
    summary_max_entries: int = 10
    log_level: str = "INFO"

    def __post_init__(self):
        if self.memory_retain > self.memory_capacity:
            raise ValueError(
                f"memory_retain ({self.memory_retain}) cannot exceed "
                f"memory_capacity ({self.memory_capacity})"
            )
        if self.memory_retain < 0 or self.message_history_rounds < 0:
            raise ValueError("memory_retain and message_history_rounds must be non-negative")


def load_settings() -> Settings:
    """Build settings from WOLFMIND_* environment variables (and a .env file)."""
    load_dotenv()
    defaults = Settings()
    return Settings(
        memory_capacity=int(os.getenv("WOLFMIND_MEMORY_CAPACITY", defaults.memory_capacity)),
        memory_retain=int(os.getenv("WOLFMIND_MEMORY_RETAIN", defaults.memory_retain)),
        message_history_rounds=int(
            os.getenv("WOLFMIND_MESSAGE_HISTORY_ROUNDS", defaults.message_history_rounds)
        ),
        summary_max_entries=int(
            os.getenv("WOLFMIND_SUMMARY_MAX_ENTRIES", defaults.summary_max_entries)
        ),
        log_level=os.getenv("WOLFMIND_LOG_LEVEL", defaults.log_level),
    )
