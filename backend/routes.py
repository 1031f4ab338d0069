from fastapi import APIRouter, UploadFile, File, Form, HTTPException
from fastapi.responses import JSONResponse, HTMLResponse
from starlette.concurrency import run_in_threadpool
from pydantic import BaseModel
from typing import List
import asyncio
import os
import requests
import json
import google.generativeai as genai
import assemblyai as aai
from dotenv import load_dotenv
import game_engine
import prompts
import strategies
import re
import traceback

load_dotenv()

router = APIRouter()

genai.configure(api_key=os.getenv("GOOGLE_API_KEY"))
model = genai.GenerativeModel(os.getenv("GEMINI_MODEL", "gemini-2.0-flash"))

JSON_CONFIG = {"response_mime_type": "application/json"}


# --- REQUEST BODIES ---

class ConversationItem(BaseModel):
    role: str
    content: str
    auto: bool = False


class TopicRequest(BaseModel):
    level: str = "normal"


class RespondRequest(BaseModel):
    topic: str
    userHint: str
    conversationHistory: List[ConversationItem] = []
    turnCount: int = 0


class ConversationRequest(BaseModel):
    topic: str
    conversationHistory: List[ConversationItem] = []


class HintRequest(BaseModel):
    hint: str
    state: dict


class StateRequest(BaseModel):
    state: dict


# --- MODEL CALLS ---

async def ask_model(prompt, json_mode=False):
    if json_mode:
        result = await model.generate_content_async(prompt, generation_config=JSON_CONFIG)
    else:
        result = await model.generate_content_async(prompt)
    try:
        return result.text.strip()
    except ValueError:
        # Blocked or empty candidates have no text
        print("🚫 Model returned no text")
        return ""


async def fetch_topic(level):
    level = game_engine.normalize_level(level)
    text = await ask_model(prompts.get_topic_prompt(level), json_mode=True)
    return game_engine.normalize_topic(game_engine.parse_json_reply(text, {}), level)


async def fetch_reply(topic, hint, history, turn_count):
    text = await ask_model(prompts.get_respond_prompt(topic, hint, history, turn_count), json_mode=True)
    return game_engine.normalize_reply(game_engine.parse_json_reply(text, game_engine.DEFAULT_REPLY), topic)


async def fetch_analysis(topic, history):
    hints = game_engine.player_hints(history)
    text = await ask_model(prompts.get_analysis_prompt(topic, hints), json_mode=True)
    return game_engine.normalize_analysis(game_engine.parse_json_reply(text, game_engine.DEFAULT_ANALYSIS), hints)


async def fetch_script(topic, history):
    return await ask_model(prompts.get_script_prompt(topic, history))


def generate_murf_speech(text):
    if not text: return None
    try:
        MURF_API_KEY = os.getenv('MURF_AI_API_KEY')
        if not MURF_API_KEY: return None
        url = "https://api.murf.ai/v1/speech/generate"
        headers = {"api-key": MURF_API_KEY, "Content-Type": "application/json"}
        clean_text = re.sub(r'[(){}\[\]「」]', '', text)
        payload = {"text": clean_text, "voice_id": os.getenv("MURF_VOICE_ID", "ja-JP-kenji"), "style": "Conversational"}

        response = requests.post(url, headers=headers, data=json.dumps(payload), timeout=30)
        data = response.json()
        if isinstance(data, dict): return data.get('audioFile')
        return None
    except (requests.RequestException, ValueError) as e:
        print(f"🔇 Speech generation failed: {e}")
        return None


def load_state(raw):
    try:
        state = json.loads(raw) if isinstance(raw, str) else raw
    except json.JSONDecodeError:
        raise HTTPException(status_code=400, detail="ゲーム状態が壊れています")
    if not isinstance(state, dict) or not isinstance(state.get("history"), list):
        raise HTTPException(status_code=400, detail="ゲーム状態が壊れています")
    if not all(isinstance(h, dict) for h in state["history"]):
        raise HTTPException(status_code=400, detail="ゲーム状態が壊れています")

    turn_count = state.setdefault("turn_count", 0)
    if type(turn_count) is not int or turn_count < 0:
        raise HTTPException(status_code=400, detail="ゲーム状態が壊れています")
    if turn_count != len(game_engine.player_hints(state["history"])):
        raise HTTPException(status_code=400, detail="ゲーム状態が壊れています")
    state["max_turns"] = game_engine.MAX_TURNS
    return state


def history_dicts(items):
    return [item.model_dump() for item in items]


# --- PROMPT ENDPOINTS ---

@router.get("/health")
async def health_check():
    return HTMLResponse(content="<h1>Manzai Partner Active 🎤</h1>")


@router.get("/api/strategies")
async def list_strategies():
    return strategies.STRATEGIES


@router.post("/api/generate-topic")
async def generate_topic(body: TopicRequest):
    try:
        return await fetch_topic(body.level)
    except Exception:
        traceback.print_exc()
        return JSONResponse(status_code=500, content={"error": "お題の生成に失敗しました"})


@router.post("/api/respond")
async def respond(body: RespondRequest):
    try:
        reply = await fetch_reply(body.topic, body.userHint, history_dicts(body.conversationHistory), body.turnCount)
        reply["response"] = reply["responseV1"]
        print(f"🎤 Hint: {body.userHint}")
        print(f"🙌 Partner: {reply['responseV1']}")
        return reply
    except Exception:
        traceback.print_exc()
        return JSONResponse(status_code=500, content={"error": "返答の生成に失敗しました"})


@router.post("/api/analyze")
async def analyze(body: ConversationRequest):
    try:
        return await fetch_analysis(body.topic, history_dicts(body.conversationHistory))
    except Exception:
        traceback.print_exc()
        return JSONResponse(status_code=500, content={"error": "分析に失敗しました"})


@router.post("/api/generate-script")
async def generate_script(body: ConversationRequest):
    try:
        return {"script": await fetch_script(body.topic, history_dicts(body.conversationHistory))}
    except Exception:
        traceback.print_exc()
        return JSONResponse(status_code=500, content={"error": "台本の生成に失敗しました"})


# --- GAME SESSION ---

@router.post("/start-session")
async def start_session(body: TopicRequest):
    try:
        topic = await fetch_topic(body.level)
    except Exception:
        traceback.print_exc()
        return JSONResponse(status_code=500, content={"error": "お題の生成に失敗しました"})

    state = game_engine.start_game(game_engine.get_initial_state(), body.level, topic["topic"], topic["category"])
    opening = game_engine.opening_line(state)
    print(f"🎲 New game: {state['difficulty']} / {state['category']}")
    return {
        "text": opening,
        "audioUrl": await run_in_threadpool(generate_murf_speech, opening),
        "state": state,
    }


async def play_hint(state, hint):
    try:
        hint = game_engine.begin_turn(state, hint)
    except game_engine.GameStateError as e:
        raise HTTPException(status_code=400, detail=str(e))

    print(f"🎤 Turn {state['turn_count']}: {hint}")
    # The model sees the history before this hint
    reply = await fetch_reply(state["topic"], hint, state["history"][:-1], state["turn_count"])
    beats = game_engine.apply_reply(state, reply)
    print(f"🙌 Partner: {reply['responseV1']} (correct={reply['isCorrect']})")

    return {
        "beats": beats,
        "guess": reply["guess"],
        "isCorrect": reply["isCorrect"],
        "game_over": state["phase"] == "summary",
        "audioUrl": await run_in_threadpool(generate_murf_speech, game_engine.last_line(state["history"], "ai")),
        "updated_state": state,
    }


@router.post("/play/hint")
async def hint(body: HintRequest):
    state = load_state(body.state)
    try:
        return await play_hint(state, body.hint)
    except HTTPException:
        raise
    except Exception:
        traceback.print_exc()
        return JSONResponse(status_code=500, content={"error": "返答の生成に失敗しました"})


@router.post("/play/hint-with-voice")
async def hint_with_voice(file: UploadFile = File(...), current_state: str = Form(...)):
    state = load_state(current_state)
    try:
        aai.settings.api_key = os.getenv("ASSEMBLYAI_API_KEY")
        audio_data = await file.read()
        config = aai.TranscriptionConfig(language_code="ja")
        transcript = await run_in_threadpool(aai.Transcriber().transcribe, audio_data, config=config)
        user_text = transcript.text or ""
        print(f"🎙️ Heard: {user_text}")

        result = await play_hint(state, user_text)
        result["transcript"] = user_text
        return result
    except HTTPException:
        raise
    except Exception:
        traceback.print_exc()
        return JSONResponse(status_code=500, content={"error": "音声ヒントの処理に失敗しました"})


@router.post("/play/finish")
async def finish(body: StateRequest):
    state = load_state(body.state)
    if not game_engine.can_finish(state):
        raise HTTPException(status_code=400, detail="もう少しヒントを出してからゲームを終了してください！")

    try:
        analysis, script = await asyncio.gather(
            fetch_analysis(state["topic"], state["history"]),
            fetch_script(state["topic"], state["history"]),
        )
    except Exception:
        traceback.print_exc()
        return JSONResponse(status_code=500, content={"error": "分析に失敗しました"})

    state = game_engine.finish(state, analysis, script)
    print(f"📜 Finished: {state['topic']} in {state['turn_count']} turns")
    return {
        "topic": state["topic"],
        "analysis": analysis,
        "script": script,
        "updated_state": state,
    }


@router.post("/play/replay")
async def replay():
    return {"state": game_engine.get_initial_state()}
