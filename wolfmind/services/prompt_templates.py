"""Prompt fragments appended to the speech, vote and last-words prompts."""

from typing import Final

MEMORY_SECTION: Final[str] = "\n\n{summary}"

THREAT_SECTION: Final[str] = "\n\n威胁评估: {threats}"

THREAT_ITEM: Final[str] = "{seat}(威胁级别: {level}): {reason}"

STRATEGY_SECTION: Final[
    str
] = """

当前策略: {primary}
理由: {reasoning}"""

TOP_THREAT_SECTION: Final[str] = "\n\n最高威胁目标: {seat} (威胁级别: {level}, 理由: {reason})"

SUSPECTS_SECTION: Final[str] = "\n\n重点怀疑: {suspects}"

SUSPECT_ITEM: Final[str] = "{seat}(威胁级别{level})"

SPEECH_LENGTH_HINT: Final[str] = "\n\n注意：发言内容控制在30-80字，语言自然，像真人玩家。"

TEAM_MESSAGES_SECTION: Final[
    str
] = """

狼队交流:
{messages}"""

TEAM_PLAN_SECTION: Final[
    str
] = """

{overall}
你的发言策略: {speech}
你的投票策略: {voting}
协调要点: {points}"""
