import json
import re

from prompts import LEVELS
from strategies import DEFAULT_COLOR, resolve_strategy

MAX_TURNS = 10
MIN_HISTORY_TO_FINISH = 2

# Client-side pauses between revealed beats
BEAT_PAUSE_MS = 1500
SUMMARY_PAUSE_MS = 2000

# --- FALLBACKS ---
DEFAULT_TOPICS = {
    "easy": {"topic": "おにぎり", "category": "食べ物"},
    "normal": {"topic": "動物園", "category": "場所"},
    "hard": {"topic": "孤独", "category": "感情"},
}

DEFAULT_REPLY = {
    "guess": "",
    "isCorrect": False,
    "responseV1": "ほな、もうちょっと詳しく教えてくれるか？",
    "responseV2": "それだけやと分からへんわ。オカンは他に何か言うてなかった？",
}

DEFAULT_ANALYSIS = {"analysis": [], "summary": ""}

OPENING_LINE = "オカンが好きな{category}があるらしいんやけど、その名前を忘れたらしくてね"
DENIAL_LINE = "でも、オカンが言うには「{guess}」ではないらしいねん"

_FENCE = re.compile(r"```(?:json)?\s*|\s*```")


class GameStateError(ValueError):
    pass


def get_initial_state():
    return {
        "phase": "intro",
        "difficulty": None,
        "topic": "",
        "category": "",
        "history": [],
        "turn_count": 0,
        "max_turns": MAX_TURNS,
        "is_correct": False,
        "script": "",
        "analysis": None,
    }


def normalize_level(level):
    return level if level in LEVELS else "normal"


def start_game(state, level, topic, category):
    state = dict(state)
    state.update({
        "phase": "playing",
        "difficulty": normalize_level(level),
        "topic": topic,
        "category": category,
        "history": [],
        "turn_count": 0,
        "is_correct": False,
        "script": "",
        "analysis": None,
    })
    return state


def opening_line(state):
    return OPENING_LINE.format(category=state.get("category") or "〇〇")


def is_capped(state):
    return state.get("turn_count", 0) >= MAX_TURNS


def begin_turn(state, hint):
    """
    Records a new hint from the player.

    Hints are only taken while playing and below the turn cap. Returns the
    stripped hint.
    """
    hint = (hint or "").strip()
    if not hint:
        raise GameStateError("ヒントを入力してください")
    if state.get("phase") != "playing":
        raise GameStateError("ゲームが進行中ではありません")
    if is_capped(state):
        raise GameStateError("ターン数の上限に達しました")

    state["turn_count"] = state.get("turn_count", 0) + 1
    state["history"].append({"role": "user", "content": hint})
    return hint


def apply_reply(state, reply):
    """
    Staged reveal of the straight-man's reply.

    The guess always comes first. A correct guess or the turn cap ends the
    game; otherwise the player's denial is added automatically and the
    straight-man takes the guess back. Returns the beats in reveal order.
    """
    beats = [{"role": "ai", "content": reply["responseV1"], "pause_ms": 0}]
    state["history"].append({"role": "ai", "content": reply["responseV1"]})

    if reply["isCorrect"] or is_capped(state):
        state["is_correct"] = bool(reply["isCorrect"])
        state["phase"] = "summary"
        beats[-1]["pause_ms"] = SUMMARY_PAUSE_MS
        return beats

    denial = DENIAL_LINE.format(guess=reply["guess"] or "それ")
    state["history"].append({"role": "user", "content": denial, "auto": True})
    state["history"].append({"role": "ai", "content": reply["responseV2"]})
    beats.append({"role": "user", "content": denial, "pause_ms": BEAT_PAUSE_MS})
    beats.append({"role": "ai", "content": reply["responseV2"], "pause_ms": BEAT_PAUSE_MS})
    return beats


def can_finish(state):
    return state.get("phase") in ("playing", "summary") and len(state.get("history", [])) >= MIN_HISTORY_TO_FINISH


def finish(state, analysis, script):
    if not can_finish(state):
        raise GameStateError("もう少しヒントを出してからゲームを終了してください！")
    state["phase"] = "result"
    state["analysis"] = analysis
    state["script"] = script
    return state


def player_hints(history):
    return [h["content"] for h in history if h.get("role") == "user" and not h.get("auto")]


def last_line(history, role):
    return next((h["content"] for h in reversed(history) if h.get("role") == role), "")


# --- MODEL OUTPUT ---

def parse_json_reply(text, default):
    """
    Parses a JSON object out of model text, Markdown fences included.
    Anything unparseable gives back a copy of `default`.
    """
    if not text:
        return dict(default)
    clean = _FENCE.sub("", text.strip()).strip()
    try:
        parsed = json.loads(clean)
    except json.JSONDecodeError:
        start = clean.find("{")
        end = clean.rfind("}")
        if start == -1 or end <= start:
            return dict(default)
        try:
            parsed = json.loads(clean[start:end + 1])
        except json.JSONDecodeError:
            return dict(default)

    if isinstance(parsed, list):
        parsed = parsed[0] if parsed else {}
    return parsed if isinstance(parsed, dict) and parsed else dict(default)


def _as_bool(value):
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return value is True


def _text(value):
    return value.strip() if isinstance(value, str) else ""


def normalize_topic(obj, level):
    fallback = DEFAULT_TOPICS[normalize_level(level)]
    topic = _text(obj.get("topic"))
    if not topic:
        return dict(fallback)
    return {"topic": topic, "category": _text(obj.get("category")) or fallback["category"]}


def normalize_reply(obj, topic):
    reply = {
        "guess": _text(obj.get("guess")) or DEFAULT_REPLY["guess"],
        "isCorrect": _as_bool(obj.get("isCorrect")),
        "responseV1": _text(obj.get("responseV1")) or DEFAULT_REPLY["responseV1"],
        "responseV2": _text(obj.get("responseV2")) or DEFAULT_REPLY["responseV2"],
    }
    reply["suggestedAnswer"] = topic if reply["isCorrect"] else None
    return reply


def normalize_analysis(obj, hints):
    items = []
    raw_items = obj.get("analysis")
    if not isinstance(raw_items, list):
        raw_items = []

    for i, item in enumerate(raw_items, start=1):
        if not isinstance(item, dict):
            continue
        strategy = resolve_strategy(item.get("strategy"), item.get("strategyName"))
        turn = item.get("turn") if isinstance(item.get("turn"), int) else i
        items.append({
            "turn": turn,
            "userHint": _text(item.get("userHint")) or (hints[turn - 1] if 0 < turn <= len(hints) else ""),
            "strategy": strategy["id"] if strategy else _text(item.get("strategy")),
            "strategyName": strategy["name"] if strategy else _text(item.get("strategyName")),
            "explanation": _text(item.get("explanation")),
            "color": strategy["color"] if strategy else DEFAULT_COLOR,
        })

    return {"analysis": items, "summary": _text(obj.get("summary"))}

