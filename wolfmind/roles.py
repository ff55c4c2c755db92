"""Game roles and their teams."""

from enum import Enum


class Role(str, Enum):
    """Available roles in the game."""

    WEREWOLF = "werewolf"
    SEER = "seer"
    WITCH = "witch"
    HUNTER = "hunter"
    GUARD = "guard"
    VILLAGER = "villager"

    def display_name(self) -> str:
        """Get the name used in analysis text (狼人, 预言家, ...)."""
        return get_role_info(self)["name"]

    @property
    def is_god_role(self) -> bool:
        """Informational roles the werewolves want to eliminate first."""
        return get_role_info(self)["god_role"]


ROLE_DESCRIPTIONS = {
    Role.WEREWOLF: {
        "name": "狼人",
        "team": "werewolves",
        "description": "Kill one player each night together with the other werewolves. Win when werewolves equal or outnumber the village.",
        "god_role": False,
    },
    Role.SEER: {
        "name": "预言家",
        "team": "village",
        "description": "Each night, inspect one player to learn whether they are a werewolf.",
        "god_role": True,
    },
    Role.WITCH: {
        "name": "女巫",
        "team": "village",
        "description": "Holds one healing potion and one poison, each usable once per game.",
        "god_role": True,
    },
    Role.HUNTER: {
        "name": "猎人",
        "team": "village",
        "description": "When eliminated, may shoot one other player.",
        "god_role": True,
    },
    Role.GUARD: {
        "name": "守卫",
        "team": "village",
        "description": "Each night, protect one player from the werewolves. Cannot protect the same player twice in a row.",
        "god_role": True,
    },
    Role.VILLAGER: {
        "name": "村民",
        "team": "village",
        "description": "No special powers. Use speeches and votes to find the werewolves.",
        "god_role": False,
    },
}


def get_role_info(role: Role) -> dict:
    """Get information about a role."""
    return ROLE_DESCRIPTIONS[role]
