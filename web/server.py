#!/usr/bin/env python3
"""
Spire Speller Web Server

JSON API over the game runner, for browser front ends.

Usage:
    python web/server.py

Then open http://localhost:8080/api/health
"""

import logging
import os
import sys
import uuid
from typing import Any, Dict, List, Optional

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel
import uvicorn

from packages.speller import (
    CardType, GameRunner, SpellerError, ProfileNotFoundError, Vocabulary,
    configure_logging, create_card, generate_map, get_pack, load_settings,
    parse_vocabulary, PRESET_PACKS, DEFAULT_PACK_ID,
)
from packages.speller.persistence import JsonFileStore, ProfileStore

logger = logging.getLogger(__name__)

app = FastAPI(title="Spire Speller")

# Live runs by id. Runs are process-local; persistent saves go through profiles.
RUNS: Dict[str, GameRunner] = {}

_profiles: Optional[ProfileStore] = None


def get_profiles() -> ProfileStore:
    global _profiles
    if _profiles is None:
        _profiles = ProfileStore(JsonFileStore(load_settings().profiles_dir))
    return _profiles


def set_profiles(store: Optional[ProfileStore]) -> None:
    """Swap the profile store (tests use a memory-backed one)."""
    global _profiles
    _profiles = store


def _get_runner(run_id: str) -> GameRunner:
    runner = RUNS.get(run_id)
    if runner is None:
        raise HTTPException(status_code=404, detail=f"No run {run_id}")
    return runner


# ============================================================================
# REQUEST MODELS
# ============================================================================

class WordIn(BaseModel):
    word: str
    phonetic: str = ""
    meaning: str = ""


class CardRequest(BaseModel):
    word: str
    type: str = "ATTACK"
    proficiency: int = 0


class NewRunRequest(BaseModel):
    pack_id: Optional[str] = None
    words: Optional[List[WordIn]] = None
    seed: Optional[int] = None
    profile_id: Optional[str] = None
    slot: Optional[int] = None


class ImportRequest(BaseModel):
    content: str
    filename: Optional[str] = None


# ============================================================================
# ENDPOINTS
# ============================================================================

@app.get("/api/health")
async def health():
    return {"status": "ok", "runs": len(RUNS)}


@app.get("/api/packs")
async def list_packs():
    return [pack.to_dict() for pack in PRESET_PACKS]


@app.get("/api/map/{seed}")
async def get_map(seed: int):
    return {"seed": seed, "nodes": [n.to_dict() for n in generate_map(seed)]}


@app.post("/api/card")
async def derive_card(request: CardRequest):
    try:
        card_type = CardType[request.type.upper()]
    except KeyError:
        raise HTTPException(status_code=400, detail=f"Unknown card type: {request.type}")
    vocab = Vocabulary.from_dict({
        **Vocabulary.create(request.word).to_dict(),
        "proficiency": max(0, min(5, request.proficiency)),
    })
    return create_card(card_type, vocab).to_dict()


@app.post("/api/runs")
async def start_run(request: NewRunRequest):
    """Start a run, or resume one from a profile save slot."""
    profiles = get_profiles() if request.profile_id else None
    if profiles is not None and profiles.get_profile(request.profile_id) is None:
        raise HTTPException(status_code=404, detail=f"No profile {request.profile_id}")
    try:
        if profiles is not None and request.slot is not None:
            runner = GameRunner.load(profiles, request.profile_id, request.slot)
            if runner is None:
                raise HTTPException(status_code=404, detail=f"Slot {request.slot} is empty")
        else:
            if request.words:
                words = [Vocabulary.create(w.word, w.phonetic, w.meaning) for w in request.words]
                pack_id = None
            else:
                pack = get_pack(request.pack_id or DEFAULT_PACK_ID)
                if pack is None:
                    raise HTTPException(status_code=400, detail=f"Unknown pack: {request.pack_id}")
                words = pack.vocab_list()
                pack_id = pack.id
            runner = GameRunner(words, pack_id=pack_id, seed=request.seed,
                                profiles=profiles, profile_id=request.profile_id)
    except ProfileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SpellerError as e:
        raise HTTPException(status_code=400, detail=str(e))

    run_id = uuid.uuid4().hex[:12]
    RUNS[run_id] = runner
    logger.info("Started run %s", run_id)
    return {"runId": run_id, "state": runner.get_observation()}


@app.get("/api/runs/{run_id}")
async def get_run(run_id: str):
    return _get_runner(run_id).get_observation()


@app.post("/api/runs/{run_id}/action")
async def take_action(run_id: str, action: Dict[str, Any]):
    runner = _get_runner(run_id)
    try:
        result = runner.take_action(action)
    except ProfileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SpellerError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"result": result, "state": runner.get_observation()}


@app.delete("/api/runs/{run_id}")
async def end_run(run_id: str):
    _get_runner(run_id)
    del RUNS[run_id]
    return {"deleted": run_id}


@app.post("/api/vocabulary/import")
async def import_vocabulary(request: ImportRequest):
    try:
        words = parse_vocabulary(request.content, filename=request.filename)
    except SpellerError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"count": len(words), "words": [v.to_dict() for v in words]}


# ============================================================================
# MAIN
# ============================================================================

def main():
    settings = load_settings()
    configure_logging(settings)
    logger.info("Serving on http://%s:%d", settings.host, settings.port)
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
