"""Keyword tables used by the speech, vote and situation heuristics.

Matching is plain substring search on lowercased text.
"""

from typing import Final

# Topic buckets for speech analysis, in the order they are reported
WOLF_TOPIC: Final[str] = "狼人相关"
SEER_TOPIC: Final[str] = "预言家相关"
WITCH_TOPIC: Final[str] = "女巫相关"
VOTING_TOPIC: Final[str] = "投票相关"
NIGHT_TOPIC: Final[str] = "夜间信息"

SPEECH_TOPICS: Final[tuple[tuple[str, tuple[str, ...]], ...]] = (
    (WOLF_TOPIC, ("狼人", "杀")),
    (SEER_TOPIC, ("预言家", "查验")),
    (WITCH_TOPIC, ("女巫", "药")),
    (VOTING_TOPIC, ("投票", "出局")),
    (NIGHT_TOPIC, ("昨晚", "夜里")),
)

# Topics that raise the relevance of a speech analysis
CORE_TOPICS: Final[tuple[str, ...]] = (WOLF_TOPIC, SEER_TOPIC, WITCH_TOPIC)

GENERAL_SPEECH: Final[str] = "一般发言"

# Contradiction detection
CLAIMABLE_ROLES: Final[tuple[str, ...]] = ("预言家", "女巫")
ROLE_CLAIM: Final[str] = "我是{role}"
ROLE_DENIAL: Final[str] = "我不是{role}"
INSPECTION: Final[str] = "查验"

# Role deduction: each speech adds the score once per matching table
SEER_CLUES: Final[tuple[str, ...]] = ("预言家", "查验")
WITCH_CLUES: Final[tuple[str, ...]] = ("女巫", "药")
VILLAGER_CLUES: Final[tuple[str, ...]] = ("我是村民", "好人")
WEREWOLF_CLUES: Final[tuple[str, ...]] = ("不确定", "可能")

# Vote pattern descriptions and the markers that flag one as suspicious
FOLLOWER_PATTERN: Final[str] = "经常跟票，可能是狼人或保守村民"
SCATTER_PATTERN: Final[str] = "投票分散，可能在搅局"
VOTE_SUSPICION_MARKERS: Final[tuple[str, ...]] = ("可疑", "搅局")

# Werewolf team situation scan
SEER_SIGNS: Final[tuple[str, ...]] = ("预言家", "查验", "昨晚我查了")
WITCH_SIGNS: Final[tuple[str, ...]] = ("女巫", "药水", "救人", "毒死")
WEREWOLF_MENTION: Final[str] = "狼人"
ACCUSATION_SIGNS: Final[tuple[str, ...]] = ("认为", "怀疑")

# Target negotiation risk markers
GOD_ROLE_REASONS: Final[tuple[str, ...]] = ("神职", "预言家", "女巫")
SUSPICION_REASONS: Final[tuple[str, ...]] = ("怀疑", "威胁")


def contains_any(text: str, keywords: tuple[str, ...]) -> bool:
    """Check whether any keyword occurs in text."""
    return any(keyword in text for keyword in keywords)
