"""Pytest configuration and fixtures."""

import pytest

from wolfmind.models import PlayerInfo, Speech, WerewolfCommunicationContext
from wolfmind.roles import Role
from wolfmind.services import CoordinationEngine, MemoryStore

# Seats 2, 4, 6 and 8 are werewolves in every fixture
WEREWOLF_TEAM = [2, 4, 6, 8]


@pytest.fixture
def roster():
    """Eight living players."""
    return [PlayerInfo(id=seat) for seat in range(1, 9)]


@pytest.fixture
def villager_store():
    """Memory of villager seat 1."""
    return MemoryStore(Role.VILLAGER, player_id=1)


@pytest.fixture
def werewolf_store():
    """Memory of werewolf seat 2."""
    return MemoryStore(Role.WEREWOLF, player_id=2, teammates=WEREWOLF_TEAM)


@pytest.fixture
def engine():
    """Coordination engine of werewolf seat 2."""
    return CoordinationEngine(Role.WEREWOLF, player_id=2, teammates=WEREWOLF_TEAM)


@pytest.fixture
def team_context(roster):
    """Round 1 team context with all four werewolves alive."""
    return WerewolfCommunicationContext(
        round=1,
        alive_players=roster,
        werewolf_team=list(WEREWOLF_TEAM),
        alive_werewolves=list(WEREWOLF_TEAM),
        target_candidates=[1, 3, 5, 7],
    )


@pytest.fixture
def seer_claims():
    """Seat 3 claims seer in rounds 1 and 2."""
    return {
        1: [Speech(3, "我是预言家，昨晚查验了5号", 1), Speech(4, "大家好", 1)],
        2: [Speech(3, "我是预言家，今天要查验7号", 2)],
    }
