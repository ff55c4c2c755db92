"""Tests for the memory store."""

import pytest

from wolfmind.config import Settings
from wolfmind.keywords import FOLLOWER_PATTERN, SCATTER_PATTERN
from wolfmind.models import GameSnapshot, PlayerInfo, Speech, Vote
from wolfmind.roles import Role
from wolfmind.services import MemoryStore
from wolfmind.services.memory_store import EMPTY_SUMMARY


def speak(store, player_id, content, round_number=1, history=None):
    """Record one speech, adding it to a history dict."""
    history = history if history is not None else {}
    speech = Speech(player_id, content, round_number)
    history.setdefault(round_number, []).append(speech)
    store.update_game_context(round_number, "day")
    return store.record_speech(speech, history, [])


class TestRecordSpeech:
    """Test speech analysis."""

    def test_topics_raise_confidence(self, villager_store):
        added = speak(villager_store, 4, "我觉得3号是狼人，昨晚他杀了人")

        entry = added[0]
        assert entry.kind == "speech_analysis"
        assert entry.content == "4号: 狼人相关, 夜间信息"
        assert entry.confidence == pytest.approx(0.7)
        assert entry.relevance == pytest.approx(0.8)
        assert entry.player_id == 4
        assert entry.source == "observation"

    def test_general_speech(self, villager_store):
        added = speak(villager_store, 4, "大家好")

        assert added[0].content == "4号: 一般发言"
        assert added[0].confidence == pytest.approx(0.5)
        assert added[0].relevance == pytest.approx(0.5)
        assert villager_store.profile(4).behaviors == []

    def test_all_topics_cap_confidence(self, villager_store):
        added = speak(villager_store, 4, "狼人 预言家 女巫 投票 昨晚")
        assert added[0].confidence == pytest.approx(1.0)

    def test_voting_topic_does_not_boost_relevance(self, villager_store):
        added = speak(villager_store, 4, "今天投票让5号出局")
        assert added[0].relevance == pytest.approx(0.5)

    def test_profile_behavior_tag(self, villager_store):
        speak(villager_store, 4, "女巫昨晚用药了吗", round_number=2)

        profile = villager_store.profile(4)
        assert profile.behaviors == ["第2轮: 女巫相关, 夜间信息"]
        assert profile.last_updated == 2

    def test_teammate_relevance_scaled(self, werewolf_store):
        added = speak(werewolf_store, 4, "预言家在哪里")
        assert added[0].relevance == pytest.approx(0.5 * 0.7 + 0.3)

    def test_contradicting_role_claim(self, villager_store):
        history = {}
        first = speak(villager_store, 3, "我是预言家", 1, history)
        second = speak(villager_store, 3, "我不是预言家", 2, history)

        assert [e.kind for e in first] == ["speech_analysis"]
        contradiction = second[-1]
        assert contradiction.kind == "contradiction"
        assert contradiction.confidence == pytest.approx(0.8)
        assert contradiction.relevance == pytest.approx(0.9)
        assert contradiction.source == "deduction"
        assert "角色声明前后矛盾" in contradiction.content
        assert villager_store.profile(3).contradictions == ["角色声明前后矛盾"]

    def test_denial_then_claim(self, villager_store):
        history = {}
        speak(villager_store, 3, "我不是女巫", 1, history)
        added = speak(villager_store, 3, "其实我是女巫", 2, history)
        assert added[-1].kind == "contradiction"

    def test_repeated_inspection_claims(self, villager_store):
        history = {}
        speak(villager_store, 3, "我查验了5号", 1, history)
        added = speak(villager_store, 3, "我查验了6号", 2, history)

        assert added[-1].content == "检测到矛盾: 查验结果可能矛盾"

    def test_later_speech_in_same_round_not_compared(self, villager_store):
        claim = Speech(3, "我是预言家", 2)
        denial = Speech(3, "我不是预言家", 2)
        history = {2: [claim, denial]}
        villager_store.update_game_context(2, "day")

        first = villager_store.record_speech(claim, history, [])
        second = villager_store.record_speech(denial, history, [])

        assert [e.kind for e in first] == ["speech_analysis"]
        assert [e.kind for e in second] == ["speech_analysis", "contradiction"]
        assert villager_store.profile(3).contradictions == ["角色声明前后矛盾"]

    def test_identical_speech_is_not_contradiction(self, villager_store):
        history = {}
        speak(villager_store, 3, "我查验了5号", 1, history)
        added = speak(villager_store, 3, "我查验了5号", 2, history)
        assert [e.kind for e in added] == ["speech_analysis"]

    def test_other_players_do_not_contradict(self, villager_store):
        history = {}
        speak(villager_store, 3, "我是预言家", 1, history)
        added = speak(villager_store, 5, "我不是预言家", 1, history)
        assert [e.kind for e in added] == ["speech_analysis"]


class TestCapacity:
    """Test the hard memory cap."""

    def test_never_exceeds_capacity(self, villager_store):
        history = {}
        for i in range(250):
            content = "狼人杀了人" if i % 3 == 0 else f"第{i}次发言"
            speak(villager_store, 3 + i % 5, content, 1 + i // 50, history)
            assert len(villager_store) <= 100

    def test_scores_stay_in_range(self, villager_store):
        history = {}
        for i in range(120):
            speak(villager_store, 3, "狼人 预言家 女巫 投票 昨晚 查验", 1, history)

        for entry in villager_store.entries():
            assert 0.0 <= entry.confidence <= 1.0
            assert 0.0 <= entry.relevance <= 1.0

    def test_eviction_keeps_best_entries(self, villager_store):
        history = {}
        speak(villager_store, 3, "我是预言家", 1, history)
        speak(villager_store, 3, "我不是预言家", 1, history)
        for i in range(98):
            speak(villager_store, 4, f"闲聊{i}", 1, history)

        kinds = [e.kind for e in villager_store.entries()]
        assert len(kinds) == 80
        assert "contradiction" in kinds

    def test_custom_capacity(self):
        store = MemoryStore(Role.VILLAGER, 1, settings=Settings(memory_capacity=10, memory_retain=5))
        history = {}
        for i in range(11):
            speak(store, 3, f"发言{i}", 1, history)
        assert len(store) == 5


class TestVotingPattern:
    """Test vote pattern detection."""

    @pytest.fixture
    def all_votes(self):
        return {
            1: [Vote(1, 3, 1), Vote(2, 3, 1), Vote(4, 3, 1), Vote(6, 5, 1)],
            2: [Vote(1, 4, 2), Vote(2, 5, 2), Vote(4, 3, 2), Vote(6, 3, 2)],
            3: [Vote(8, 1, 3)],
        }

    def test_follower_and_scatter(self, villager_store, all_votes):
        added = villager_store.record_voting_pattern(all_votes[2], all_votes, [])

        about_six = {e.content: e.confidence for e in added if e.player_id == 6}
        assert about_six[FOLLOWER_PATTERN] == pytest.approx(0.6)
        assert about_six[SCATTER_PATTERN] == pytest.approx(0.5)
        assert all(e.kind == "vote_pattern" for e in added)
        assert all(e.relevance == pytest.approx(0.8) for e in added if e.player_id == 6)

    def test_consistent_early_voter_not_flagged(self, villager_store, all_votes):
        added = villager_store.record_voting_pattern(all_votes[2], all_votes, [])
        assert not [e for e in added if e.player_id == 4]

    def test_single_vote_ignored(self, villager_store, all_votes):
        added = villager_store.record_voting_pattern(all_votes[3], all_votes, [])
        assert not [e for e in added if e.player_id == 8]

    def test_scattered_voter_flagged(self, villager_store, all_votes):
        added = villager_store.record_voting_pattern(all_votes[2], all_votes, [])
        assert [e.content for e in added if e.player_id == 1] == [SCATTER_PATTERN]

    def test_teammate_vote_relevance_scaled(self, werewolf_store, all_votes):
        added = werewolf_store.record_voting_pattern(all_votes[2], all_votes, [])
        about_six = [e for e in added if e.player_id == 6]
        assert about_six
        assert all(e.relevance == pytest.approx(0.8 * 0.7) for e in about_six)


class TestDeduceRoles:
    """Test role deduction."""

    def test_seer_claim(self, villager_store, roster, seer_claims):
        deductions = villager_store.deduce_roles(roster, seer_claims, {})

        assert deductions[3].role == Role.SEER
        assert deductions[3].confidence == pytest.approx(0.4)
        assert 4 not in deductions
        assert villager_store.profile(3).suspected_role == Role.SEER

        recorded = [e for e in villager_store.entries() if e.kind == "role_deduction"]
        assert len(recorded) == 1
        assert recorded[0].content == "推断角色: seer (置信度: 0.4)"

    def test_confidence_capped(self, villager_store, roster):
        speeches = {r: [Speech(3, "我查验了", r)] for r in range(1, 6)}
        deductions = villager_store.deduce_roles(roster, speeches, {})
        assert deductions[3].confidence == pytest.approx(0.8)

    def test_skips_self(self, villager_store, roster):
        speeches = {r: [Speech(1, "我是预言家", r)] for r in range(1, 4)}
        assert villager_store.deduce_roles(roster, speeches, {}) == {}

    def test_tie_prefers_seer_over_witch(self, villager_store, roster):
        speeches = {r: [Speech(5, "预言家说女巫有药", r)] for r in range(1, 3)}
        deductions = villager_store.deduce_roles(roster, speeches, {})
        assert deductions[5].role == Role.SEER

    def test_contradictions_boost_werewolf(self, villager_store, roster):
        history = {}
        speak(villager_store, 7, "我是预言家", 1, history)
        speak(villager_store, 7, "我不是预言家", 2, history)
        speak(villager_store, 7, "我是预言家", 3, history)
        assert len(villager_store.profile(7).contradictions) == 2

        deductions = villager_store.deduce_roles(roster, {4: [Speech(7, "可能吧", 4)]}, {})
        assert deductions[7].role == Role.WEREWOLF
        assert deductions[7].confidence == pytest.approx(0.4)

    def test_only_alive_players(self, villager_store, seer_claims):
        deductions = villager_store.deduce_roles([PlayerInfo(id=5)], seer_claims, {})
        assert deductions == {}


class TestSummarize:
    """Test memory summaries."""

    def test_empty_sentinel(self, villager_store):
        assert villager_store.summarize() == EMPTY_SUMMARY
        speak(villager_store, 4, "大家好")
        assert villager_store.summarize() == EMPTY_SUMMARY

    def test_format(self, villager_store):
        speak(villager_store, 4, "狼人杀了人")
        assert villager_store.summarize() == "重要记忆信息:\n第1轮: 4号: 狼人相关 (置信度: 60%)"

    def test_ranked_by_score(self, villager_store):
        speak(villager_store, 4, "狼人杀了人")
        speak(villager_store, 5, "狼人 预言家 女巫 投票 昨晚")

        lines = villager_store.summarize().splitlines()
        assert lines[1].startswith("第1轮: 5号")
        assert lines[2].startswith("第1轮: 4号")

    def test_max_entries(self, villager_store):
        for seat in range(3, 9):
            speak(villager_store, seat, "狼人杀了人")
        assert len(villager_store.summarize(2).splitlines()) == 3

    def test_idempotent(self, villager_store):
        speak(villager_store, 4, "狼人杀了人")
        speak(villager_store, 5, "预言家查验了")
        assert villager_store.summarize() == villager_store.summarize()


class TestThreatAssessment:
    """Test threat ranking."""

    def werewolf_talk(self):
        return {r: [Speech(4, "我不确定，可能吧", r)] for r in range(1, 5)}

    def test_suspected_werewolf(self, villager_store, roster):
        speeches = self.werewolf_talk()
        for speech in speeches[1]:
            villager_store.record_speech(speech, speeches, roster)
        villager_store.deduce_roles(roster, speeches, {})

        threats = villager_store.threat_assessment()
        assert len(threats) == 1
        assert threats[0].player_id == 4
        assert threats[0].threat_level == pytest.approx(0.8)
        assert threats[0].reason == "疑似狼人"

    def test_werewolf_ignores_suspected_werewolves(self, werewolf_store, roster):
        speeches = {r: [Speech(3, "我不确定，可能吧", r)] for r in range(1, 5)}
        werewolf_store.deduce_roles(roster, speeches, {})
        assert werewolf_store.threat_assessment() == []

    def test_contradictions_and_scattered_votes(self, villager_store):
        history = {}
        speak(villager_store, 5, "我查验了1号", 1, history)
        speak(villager_store, 5, "我查验了2号", 2, history)
        speak(villager_store, 5, "我查验了3号", 3, history)
        assert len(villager_store.profile(5).contradictions) == 3
        assert villager_store.threat_assessment() == []

        votes = {1: [Vote(5, 1, 1)], 2: [Vote(5, 2, 2)]}
        villager_store.record_voting_pattern(votes[2], votes, [])

        threats = villager_store.threat_assessment()
        assert threats[0].player_id == 5
        assert threats[0].threat_level == pytest.approx(0.5)
        assert threats[0].reason == "发言矛盾, 投票行为可疑"

    def test_capped_and_sorted(self, villager_store, roster):
        history = {}
        for r in range(1, 4):
            speak(villager_store, 4, f"查验结果是{r}号", r, history)
            speak(villager_store, 6, f"我查验了{r}号", r, history)
        votes = {
            1: [Vote(6, 1, 1), Vote(4, 1, 1)],
            2: [Vote(6, 3, 2), Vote(4, 3, 2)],
        }
        villager_store.record_voting_pattern(votes[2], votes, [])
        villager_store.deduce_roles(roster, {4: [Speech(6, "可能吧", 4)]}, votes)

        threats = villager_store.threat_assessment()
        assert [t.player_id for t in threats] == [6, 4]
        assert threats[0].threat_level == pytest.approx(1.0)
        assert threats[0].reason == "疑似狼人, 发言矛盾, 投票行为可疑"
        assert threats[1].threat_level == pytest.approx(0.5)


class TestGenerateStrategy:
    """Test strategy generation."""

    def test_records_strategy_entry(self, villager_store, roster):
        snapshot = GameSnapshot(round=1, phase="day", alive_players=roster)
        plan = villager_store.generate_strategy(snapshot)

        assert plan.primary_strategy == "分析发言，寻找逻辑漏洞"
        assert plan.risk_level == "low"
        entry = villager_store.entries()[-1]
        assert entry.kind == "strategy"
        assert entry.confidence == pytest.approx(0.7)
        assert entry.relevance == pytest.approx(1.0)
        assert entry.content == "策略: 分析发言，寻找逻辑漏洞 | 理由: 作为村民需要通过逻辑分析找出狼人"

    def test_every_call_records(self, villager_store, roster):
        snapshot = GameSnapshot(round=1, phase="day", alive_players=roster)
        villager_store.generate_strategy(snapshot)
        villager_store.generate_strategy(snapshot)
        assert len([e for e in villager_store.entries() if e.kind == "strategy"]) == 2

    def test_werewolf_targets_god_roles(self, werewolf_store, roster, seer_claims):
        werewolf_store.deduce_roles(roster, seer_claims, {})
        plan = werewolf_store.generate_strategy(
            GameSnapshot(round=2, phase="day", alive_players=roster)
        )
        assert plan.target_players == [3]
        assert plan.risk_level == "medium"

    def test_dead_players_not_targeted(self, werewolf_store, roster, seer_claims):
        werewolf_store.deduce_roles(roster, seer_claims, {})
        alive = [p for p in roster if p.id != 3]
        plan = werewolf_store.generate_strategy(GameSnapshot(round=2, phase="day", alive_players=alive))
        assert plan.target_players == []

    def test_supporting_memories(self, villager_store, roster):
        speak(villager_store, 4, "狼人杀了人")
        plan = villager_store.generate_strategy(GameSnapshot(round=1, phase="day", alive_players=roster))
        assert plan.supporting_memories == ["4号: 狼人相关"]


class TestQueries:
    """Test read-only helpers."""

    def test_profile_is_a_copy(self, villager_store):
        speak(villager_store, 4, "狼人杀了人")
        copy = villager_store.profile(4)
        copy.behaviors.append("tampered")
        assert "tampered" not in villager_store.profile(4).behaviors

    def test_unknown_profile(self, villager_store):
        assert villager_store.profile(9) is None

    def test_relevant_entries_window(self, villager_store):
        speak(villager_store, 4, "狼人杀了人", 1)
        speak(villager_store, 5, "狼人杀了人", 5)

        relevant = villager_store.relevant_entries()
        assert [e.player_id for e in relevant] == [5]
