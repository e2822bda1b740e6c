"""FastAPI-powered web UI for playing ClassicXO in the browser."""

from __future__ import annotations

import logging
import random
import uuid
from typing import Dict, Optional, Tuple

from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .ai import DifficultyConfig
from .config import load_settings
from .game import IllegalMoveAttempt, InvalidMove, NoLegalMove, Player
from .session import GameSession, SessionView

logger = logging.getLogger(__name__)

SETTINGS = load_settings()
SESSIONS: Dict[str, GameSession] = {}
app = FastAPI(title="ClassicXO", description="Tic-tac-toe against the computer")


def _normalize_mark(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    mark = value.strip().upper()
    if mark not in ("X", "O"):
        raise ValueError("firstPlayer must be 'X' or 'O'")
    return mark


class NewGameRequest(BaseModel):
    """Request payload for creating a session and starting its first game."""

    model_config = ConfigDict(populate_by_name=True)

    random_move_probability: Optional[float] = Field(
        default=None,
        alias="randomMoveProbability",
        ge=0.0,
        le=1.0,
        description="Chance the computer plays a random move instead of its best one",
    )
    first_player: Optional[str] = Field(default=None, alias="firstPlayer")
    seed: Optional[int] = Field(
        default=None, description="Seed for a reproducible session"
    )

    @field_validator("first_player")
    @classmethod
    def ensure_known_mark(cls, value: Optional[str]) -> Optional[str]:
        return _normalize_mark(value)


class NextGameRequest(BaseModel):
    """Request payload for starting another game in an existing session."""

    model_config = ConfigDict(populate_by_name=True)

    first_player: Optional[str] = Field(default=None, alias="firstPlayer")

    @field_validator("first_player")
    @classmethod
    def ensure_known_mark(cls, value: Optional[str]) -> Optional[str]:
        return _normalize_mark(value)


class MoveRequest(BaseModel):
    """Request payload for submitting a human move."""

    model_config = ConfigDict(populate_by_name=True)

    cell_index: int = Field(alias="cellIndex", ge=0, le=8)


class DifficultyRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    random_move_probability: float = Field(
        alias="randomMoveProbability", ge=0.0, le=1.0
    )


def _create_session(
    random_move_probability: Optional[float], seed: Optional[int]
) -> Tuple[str, GameSession]:
    """Create a new game session and register it for later access."""

    if random_move_probability is None:
        random_move_probability = SETTINGS.random_move_probability
    session = GameSession(
        difficulty=DifficultyConfig(random_move_probability),
        rng=random.Random(seed),
    )
    session_id = uuid.uuid4().hex
    SESSIONS[session_id] = session
    logger.info(
        "created session %s (random move probability %.2f)",
        session_id,
        random_move_probability,
    )
    return session_id, session


def _get_session(game_id: str) -> GameSession:
    try:
        return SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc


def _serialize(game_id: str, view: SessionView) -> Dict[str, object]:
    state: Dict[str, object] = {"id": game_id}
    state.update(view.to_dict())
    if view.move_log:
        state["lastMove"] = view.move_log[-1]
    return state


def _start_game(
    game_id: str, session: GameSession, first_player: Optional[Player]
) -> SessionView:
    try:
        return session.start_new_game(first_player)
    except NoLegalMove as exc:
        logger.exception("computer could not move in session %s", game_id)
        raise HTTPException(status_code=500, detail=str(exc)) from exc


@app.post("/api/game")
def create_game(request: NewGameRequest) -> Dict[str, object]:
    game_id, session = _create_session(request.random_move_probability, request.seed)
    view = _start_game(game_id, session, request.first_player)
    return _serialize(game_id, view)


@app.get("/api/game/{game_id}")
def get_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    return _serialize(game_id, session.view())


@app.post("/api/game/{game_id}/move")
def make_move(game_id: str, request: MoveRequest) -> Dict[str, object]:
    session = _get_session(game_id)
    try:
        view = session.human_move(request.cell_index)
    except (InvalidMove, IllegalMoveAttempt) as exc:
        logger.info("rejected move %d in %s: %s", request.cell_index, game_id, exc)
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except NoLegalMove as exc:
        logger.exception("computer could not move in session %s", game_id)
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return _serialize(game_id, view)


@app.post("/api/game/{game_id}/new")
def next_game(
    game_id: str, request: Optional[NextGameRequest] = None
) -> Dict[str, object]:
    session = _get_session(game_id)
    first_player = request.first_player if request is not None else None
    return _serialize(game_id, _start_game(game_id, session, first_player))


@app.put("/api/game/{game_id}/difficulty")
def set_difficulty(game_id: str, request: DifficultyRequest) -> Dict[str, object]:
    session = _get_session(game_id)
    view = session.configure(request.random_move_probability)
    return _serialize(game_id, view)


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    return HTML_PAGE


HTML_PAGE = """<!DOCTYPE html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <title>ClassicXO</title>
    <style>
      body {
        margin: 0;
        min-height: 100vh;
        display: flex;
        justify-content: center;
        padding: 2rem 1rem;
        font-family: system-ui, -apple-system, \"Segoe UI\", sans-serif;
        background: radial-gradient(circle at top, #f2f5ff, #cfd8ff 70%);
        color: #13203a;
      }
      main {
        background: rgba(255, 255, 255, 0.92);
        border-radius: 18px;
        box-shadow: 0 20px 40px rgba(34, 47, 79, 0.16);
        padding: 2rem;
        width: min(420px, 100%);
        text-align: center;
      }
      #board {
        display: grid;
        grid-template-columns: repeat(3, 96px);
        gap: 6px;
        justify-content: center;
        margin: 1.5rem 0;
      }
      .cell {
        width: 96px;
        height: 96px;
        font-size: 2.4rem;
        font-weight: 600;
        border: 1px solid #9aa7cf;
        border-radius: 10px;
        background: #fff;
        cursor: pointer;
      }
      .cell:disabled { cursor: default; }
      .scores { display: flex; justify-content: space-around; }
      .toolbar { display: flex; gap: 0.5rem; justify-content: center; flex-wrap: wrap; }
      #message { color: #b3261e; min-height: 1.2rem; }
    </style>
  </head>
  <body>
    <main>
      <h1>ClassicXO</h1>
      <p id=\"status\">Setting up your game…</p>
      <div id=\"board\"></div>
      <p id=\"message\"></p>
      <div class=\"scores\">
        <span>Player (X) wins: <strong id=\"wins-x\">0</strong></span>
        <span>Machine (O) wins: <strong id=\"wins-o\">0</strong></span>
      </div>
      <div class=\"toolbar\">
        <button id=\"new-game\">New game</button>
        <button id=\"new-game-x\">New game with X</button>
        <label>
          Randomness
          <input id=\"difficulty\" type=\"range\" min=\"0\" max=\"1\" step=\"0.05\" />
        </label>
      </div>
    </main>
    <script>
      const boardEl = document.getElementById('board');
      const statusEl = document.getElementById('status');
      const messageEl = document.getElementById('message');
      const difficultyEl = document.getElementById('difficulty');
      let gameId = null;
      let gameState = null;

      function render() {
        boardEl.innerHTML = '';
        if (!gameState) return;
        const open = gameState.state === 'awaiting_human_move';
        gameState.board.forEach((value, index) => {
          const cell = document.createElement('button');
          cell.className = 'cell';
          cell.textContent = value;
          cell.disabled = !open || value !== '';
          cell.addEventListener('click', () => sendMove(index));
          boardEl.appendChild(cell);
        });
        if (gameState.status === 'won') {
          statusEl.textContent = `Winner: ${gameState.winner}`;
        } else if (gameState.status === 'drawn') {
          statusEl.textContent = 'Draw';
        } else {
          statusEl.textContent = `Next player: ${gameState.currentPlayer}`;
        }
        document.getElementById('wins-x').textContent = gameState.winsX;
        document.getElementById('wins-o').textContent = gameState.winsO;
        difficultyEl.value = gameState.randomMoveProbability;
      }

      async function call(url, method, body) {
        messageEl.textContent = '';
        const response = await fetch(url, {
          method,
          headers: { 'Content-Type': 'application/json' },
          body: body === undefined ? undefined : JSON.stringify(body),
        });
        const payload = await response.json().catch(() => ({}));
        if (!response.ok) {
          messageEl.textContent = payload?.detail || 'Request failed';
          return;
        }
        gameId = payload.id;
        gameState = payload;
        render();
      }

      function newGame(firstPlayer) {
        if (!gameId) {
          return call('/api/game', 'POST', firstPlayer ? { firstPlayer } : {});
        }
        return call(`/api/game/${gameId}/new`, 'POST', firstPlayer ? { firstPlayer } : {});
      }

      function sendMove(cellIndex) {
        return call(`/api/game/${gameId}/move`, 'POST', { cellIndex });
      }

      document.getElementById('new-game').addEventListener('click', () => newGame(null));
      document.getElementById('new-game-x').addEventListener('click', () => newGame('X'));
      difficultyEl.addEventListener('change', () => {
        if (!gameId) return;
        call(`/api/game/${gameId}/difficulty`, 'PUT', {
          randomMoveProbability: Number.parseFloat(difficultyEl.value),
        });
      });

      newGame(null);
    </script>
  </body>
</html>
"""
