from __future__ import annotations

import logging
import uuid
from typing import Dict, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from starlette.middleware.sessions import SessionMiddleware

from agent.agent import get_responder
from agent.core.memory import SessionMemory, get_memory
from config.settings import get_settings
from game.catalog import LOCATIONS
from game.engine import Responder, take_turn
from game.state import GameState


logging.basicConfig(level=logging.INFO, format="[%(asctime)s] %(levelname)s - %(message)s")
logger = logging.getLogger("london_adventure")

app = FastAPI(title="London Adventure", version="1.0.0")

settings = get_settings()
logger.info(
    "Config: env=%s model=%s key_set=%s locations=%s",
    settings.app_env,
    settings.gemini_model,
    bool(settings.google_api_key),
    len(LOCATIONS),
)

# Credentials must be allowed for the session cookie; "*" reflects the caller's origin
if "*" in settings.cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=".*",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
else:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.add_middleware(
    SessionMiddleware,
    secret_key=settings.session_secret,
    session_cookie="london_adventure",
    max_age=settings.session_ttl_seconds,
    https_only=settings.session_cookie_secure,
)


class ChatRequest(BaseModel):
    message: Optional[str] = Field(None, description="Player's latest message")


class ChatResponse(BaseModel):
    reply: str


def _session_id(request: Request) -> str:
    sid = request.session.get("sid")
    if not isinstance(sid, str) or not sid:
        sid = uuid.uuid4().hex
        request.session["sid"] = sid
    return sid


@app.post("/chat", response_model=ChatResponse)
def chat(
    req: ChatRequest,
    request: Request,
    memory: SessionMemory = Depends(get_memory),
    responder: Responder = Depends(get_responder),
) -> Dict[str, str]:
    sid = _session_id(request)
    memory.purge_expired()

    with memory.locked(sid):
        record = memory.load(sid)
        turn = take_turn(record, req.message, responder)
        updated = turn.state.to_dict()
        if updated != record:
            memory.save(sid, updated)
        else:
            memory.touch(sid)

    before = GameState.restore(record, total=len(LOCATIONS))
    logger.info(
        "Chat turn: session=%s command=%s index=%s->%s started=%s clue_given=%s reply_len=%s",
        sid[:8],
        turn.command.value,
        before.index,
        turn.state.index,
        turn.state.started,
        turn.state.clue_given,
        len(turn.reply),
    )
    return {"reply": turn.reply}


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/")
def index():
    return {"status": "ok", "service": "London Adventure"}
