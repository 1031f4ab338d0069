import pytest

import game_engine
from game_engine import GameStateError


def playing_state():
    return game_engine.start_game(game_engine.get_initial_state(), "easy", "おにぎり", "食べ物")


def reply(guess="傘", correct=False):
    return game_engine.normalize_reply(
        {"guess": guess, "isCorrect": correct, "responseV1": "ほな傘やないかい！", "responseV2": "ほな傘と違うかぁ"},
        "おにぎり",
    )


def test_initial_state_is_intro():
    state = game_engine.get_initial_state()
    assert state["phase"] == "intro"
    assert state["history"] == []
    assert state["turn_count"] == 0
    assert state["max_turns"] == 10


def test_start_game_resets_previous_round():
    old = playing_state()
    game_engine.begin_turn(old, "三角形")
    old["script"] = "old script"

    state = game_engine.start_game(old, "hard", "孤独", "感情")

    assert state["phase"] == "playing"
    assert state["difficulty"] == "hard"
    assert state["history"] == []
    assert state["turn_count"] == 0
    assert state["script"] == ""


def test_unknown_level_falls_back_to_normal():
    assert game_engine.normalize_level("extreme") == "normal"
    assert game_engine.normalize_level(None) == "normal"
    assert game_engine.normalize_level("easy") == "easy"


def test_opening_line_uses_category():
    assert "食べ物" in game_engine.opening_line(playing_state())
    assert "〇〇" in game_engine.opening_line({"category": ""})


def test_begin_turn_counts_and_appends():
    state = playing_state()
    assert game_engine.begin_turn(state, "  海苔で巻いてる  ") == "海苔で巻いてる"
    assert state["turn_count"] == 1
    assert state["history"] == [{"role": "user", "content": "海苔で巻いてる"}]


def test_begin_turn_rejects_empty_hint():
    state = playing_state()
    with pytest.raises(GameStateError):
        game_engine.begin_turn(state, "   ")
    assert state["turn_count"] == 0


def test_begin_turn_rejects_outside_play():
    with pytest.raises(GameStateError):
        game_engine.begin_turn(game_engine.get_initial_state(), "ヒント")


def test_wrong_guess_reveals_three_beats():
    state = playing_state()
    game_engine.begin_turn(state, "三角形")
    beats = game_engine.apply_reply(state, reply())

    assert [b["role"] for b in beats] == ["ai", "user", "ai"]
    assert beats[1]["content"] == "でも、オカンが言うには「傘」ではないらしいねん"
    assert state["phase"] == "playing"
    assert state["history"][2]["auto"] is True
    assert len(state["history"]) == 4


def test_correct_guess_moves_to_summary():
    state = playing_state()
    game_engine.begin_turn(state, "海苔で巻いてる")
    beats = game_engine.apply_reply(state, reply("おにぎり", correct=True))

    assert len(beats) == 1
    assert beats[0]["pause_ms"] == game_engine.SUMMARY_PAUSE_MS
    assert state["phase"] == "summary"
    assert state["is_correct"] is True


def test_turn_cap_ends_game_and_blocks_more_hints(monkeypatch):
    monkeypatch.setattr(game_engine, "MAX_TURNS", 3)
    state = playing_state()
    for i in range(3):
        game_engine.begin_turn(state, f"ヒント{i}")
        game_engine.apply_reply(state, reply())

    assert state["turn_count"] == 3
    assert state["phase"] == "summary"
    assert state["is_correct"] is False
    with pytest.raises(GameStateError):
        game_engine.begin_turn(state, "もう一個")
    assert state["turn_count"] == 3


def test_cap_ignores_max_turns_from_client():
    state = playing_state()
    state["max_turns"] = 1000
    for i in range(game_engine.MAX_TURNS):
        game_engine.begin_turn(state, f"ヒント{i}")
        game_engine.apply_reply(state, reply())

    assert state["turn_count"] == game_engine.MAX_TURNS
    assert state["phase"] == "summary"
    with pytest.raises(GameStateError):
        game_engine.begin_turn(state, "まだまだ")


def test_history_only_grows_during_a_game():
    state = playing_state()
    lengths = [len(state["history"])]
    for i in range(4):
        game_engine.begin_turn(state, f"ヒント{i}")
        lengths.append(len(state["history"]))
        game_engine.apply_reply(state, reply())
        lengths.append(len(state["history"]))
        assert state["turn_count"] == i + 1

    assert lengths == sorted(lengths)
    assert len(set(lengths)) == len(lengths)


def test_finish_needs_two_history_entries():
    state = playing_state()
    assert not game_engine.can_finish(state)
    with pytest.raises(GameStateError):
        game_engine.finish(state, {}, "")

    game_engine.begin_turn(state, "三角形")
    game_engine.apply_reply(state, reply())
    result = game_engine.finish(state, {"analysis": [], "summary": ""}, "台本")

    assert result["phase"] == "result"
    assert result["script"] == "台本"


def test_player_hints_skip_auto_denials():
    state = playing_state()
    game_engine.begin_turn(state, "三角形")
    game_engine.apply_reply(state, reply())
    game_engine.begin_turn(state, "コンビニにある")

    assert game_engine.player_hints(state["history"]) == ["三角形", "コンビニにある"]
    assert game_engine.last_line(state["history"], "ai") == "ほな傘と違うかぁ"


@pytest.mark.parametrize("text", [
    '{"topic": "傘", "category": "道具"}',
    '```json\n{"topic": "傘", "category": "道具"}\n```',
    'はい、どうぞ。{"topic": "傘", "category": "道具"} 以上です。',
    '[{"topic": "傘", "category": "道具"}]',
])
def test_parse_json_reply_accepts_model_noise(text):
    assert game_engine.parse_json_reply(text, {}) == {"topic": "傘", "category": "道具"}


@pytest.mark.parametrize("text", ["", "ほな知らんわ", "{broken", "[]", "{}"])
def test_parse_json_reply_falls_back(text):
    default = {"fallback": True}
    parsed = game_engine.parse_json_reply(text, default)
    assert parsed == default
    assert parsed is not default


def test_normalize_reply_fills_defaults():
    result = game_engine.normalize_reply({}, "おにぎり")
    assert result["isCorrect"] is False
    assert result["responseV1"] == game_engine.DEFAULT_REPLY["responseV1"]
    assert result["suggestedAnswer"] is None


def test_normalize_reply_trusts_only_model_flag():
    assert game_engine.normalize_reply({"isCorrect": "true"}, "傘")["suggestedAnswer"] == "傘"
    assert game_engine.normalize_reply({"isCorrect": "yes"}, "傘")["isCorrect"] is False
    assert game_engine.normalize_reply({"isCorrect": 1}, "傘")["isCorrect"] is False


def test_normalize_topic_fallback_per_level():
    assert game_engine.normalize_topic({}, "hard") == {"topic": "孤独", "category": "感情"}
    assert game_engine.normalize_topic({"topic": "傘"}, "easy") == {"topic": "傘", "category": "食べ物"}


def test_normalize_analysis_resolves_strategies():
    obj = {
        "analysis": [
            {"turn": 1, "strategy": "generalization", "strategyName": "", "explanation": "まとめた"},
            {"turn": 2, "strategy": "?", "strategyName": "Concretion", "explanation": "場面"},
            {"strategy": "made-up", "strategyName": "謎"},
            "junk",
        ],
        "summary": "  具体的  ",
    }
    result = game_engine.normalize_analysis(obj, ["食べ物", "朝に食べる", "三角"])
    items = result["analysis"]

    assert [i["strategy"] for i in items] == ["generalization", "concretion", "made-up"]
    assert items[0]["strategyName"] == "一般化"
    assert items[0]["userHint"] == "食べ物"
    assert items[1]["color"] == "red"
    assert items[2]["turn"] == 3
    assert items[2]["color"] == "blue"
    assert result["summary"] == "具体的"
