"""FastAPI-powered web UI for playing classic tic-tac-toe against the computer."""

from __future__ import annotations

import logging
import random
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import threading

from fastapi import BackgroundTasks, FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .ai import Difficulty, MoveSelector
from .game import EMPTY, ClassicXOGame, winning_line

logger = logging.getLogger(__name__)

HUMAN: str = "X"
COMPUTER: str = "O"
DEFAULT_NAME = "Guest"
MAX_NAME_LENGTH = 40
AI_THINK_DELAY: Tuple[float, float] = (0.45, 0.45)


@dataclass
class GameSession:
    """Container for an active game, its player and the computer opponent."""

    game: ClassicXOGame
    selector: MoveSelector
    difficulty: Difficulty = Difficulty.MEDIUM
    player_name: str = DEFAULT_NAME
    move_log: List[Dict[str, int | str]] = field(default_factory=list)
    ai_pending: bool = False
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


SESSIONS: Dict[str, GameSession] = {}
app = FastAPI(title="ClassicXO", description="Tic-tac-toe against a computer opponent")


class NewGameRequest(BaseModel):
    """Request payload for starting a new game."""

    name: str = Field(default="", max_length=MAX_NAME_LENGTH)
    difficulty: Difficulty = Field(
        default=Difficulty.MEDIUM,
        description="Computer policy: easy (random), medium (win/block), hard (minimax)",
    )

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        return value.strip()


class MoveRequest(BaseModel):
    """Request payload for submitting a move on an existing game."""

    model_config = ConfigDict(populate_by_name=True)

    cell_index: int = Field(alias="cellIndex", ge=0, le=8)


class DifficultyRequest(BaseModel):
    difficulty: Difficulty


def _create_session(name: str, difficulty: Difficulty) -> Tuple[str, GameSession]:
    """Create a new game session and register it for later access."""

    session = GameSession(
        game=ClassicXOGame(),
        selector=MoveSelector(player=COMPUTER),
        difficulty=difficulty,
        player_name=name or DEFAULT_NAME,
    )
    session_id = uuid.uuid4().hex
    SESSIONS[session_id] = session
    logger.info(
        "Started game %s for %s on %s", session_id, session.player_name, difficulty.value
    )
    return session_id, session


def _get_session(game_id: str) -> GameSession:
    try:
        return SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc


def _run_ai_turn(game_id: str) -> None:
    session = SESSIONS.get(game_id)
    if not session:
        return

    time.sleep(max(0.0, random.uniform(*AI_THINK_DELAY)))

    with session.lock:
        try:
            game = session.game
            if game.finished or game.current_player != COMPUTER:
                return
            cell_index = session.selector.select_move(game.board, session.difficulty)
            if cell_index is None:
                return
            game.play_move(cell_index)
            session.move_log.append({"player": COMPUTER, "cellIndex": cell_index})
        finally:
            session.ai_pending = False


def _status_message(session: GameSession) -> str:
    game = session.game
    outcome = game.outcome
    if outcome.is_draw:
        return "It's a draw!"
    if outcome.is_win:
        return f"{session.player_name} won!" if outcome.winner == HUMAN else "Computer won"
    if game.current_player == HUMAN:
        return f"{session.player_name}'s turn"
    return "Computer's turn"


def _serialize_session(game_id: str, session: GameSession) -> Dict[str, object]:
    with session.lock:
        game = session.game
        outcome = game.outcome
        line = winning_line(game.board)

        state: Dict[str, object] = {
            "id": game_id,
            "playerName": session.player_name,
            "difficulty": session.difficulty.value,
            "board": [c if c != EMPTY else "" for c in game.board],
            "currentPlayer": game.current_player,
            "status": outcome.kind,
            "winner": outcome.winner,
            "winningLine": list(line) if line else None,
            "availableMoves": game.available_moves(),
            "message": _status_message(session),
            "moveLog": list(session.move_log),
            "aiPending": session.ai_pending,
        }
        if session.move_log:
            state["lastMove"] = session.move_log[-1]
        return state


def _apply_player_move(
    game_id: str,
    session: GameSession,
    cell_index: int,
    background_tasks: Optional[BackgroundTasks] = None,
) -> None:
    should_schedule_ai = False
    with session.lock:
        game = session.game
        if game.finished:
            raise HTTPException(status_code=400, detail="Game already finished")

        if session.ai_pending:
            raise HTTPException(status_code=400, detail="Computer is completing its move")

        if game.current_player != HUMAN:
            raise HTTPException(status_code=400, detail="It is not your turn")

        try:
            game.play_move(cell_index)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        session.move_log.append({"player": HUMAN, "cellIndex": cell_index})

        should_schedule_ai = not game.finished and game.current_player == COMPUTER
        if should_schedule_ai:
            session.ai_pending = True

    if should_schedule_ai and background_tasks is not None:
        background_tasks.add_task(_run_ai_turn, game_id)


@app.post("/api/game")
def create_game(request: NewGameRequest) -> Dict[str, object]:
    game_id, session = _create_session(request.name, request.difficulty)
    return _serialize_session(game_id, session)


@app.get("/api/game/{game_id}")
def get_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/move")
def make_move(
    game_id: str, request: MoveRequest, background_tasks: BackgroundTasks
) -> Dict[str, object]:
    session = _get_session(game_id)
    _apply_player_move(game_id, session, request.cell_index, background_tasks)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/difficulty")
def change_difficulty(game_id: str, request: DifficultyRequest) -> Dict[str, object]:
    session = _get_session(game_id)
    with session.lock:
        session.difficulty = request.difficulty
    logger.info("Game %s difficulty set to %s", game_id, request.difficulty.value)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/round")
def new_round(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    with session.lock:
        if session.ai_pending:
            raise HTTPException(status_code=400, detail="Computer is completing its move")
        session.game.reset()
        session.move_log.clear()
    logger.info("Game %s started a new round", game_id)
    return _serialize_session(game_id, session)


@app.delete("/api/game/{game_id}")
def end_game(game_id: str) -> Dict[str, str]:
    _get_session(game_id)
    SESSIONS.pop(game_id, None)
    logger.info("Game %s closed", game_id)
    return {"id": game_id, "status": "closed"}


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
      :root {
        color-scheme: dark;
        font-family: system-ui, -apple-system, BlinkMacSystemFont, \"Segoe UI\", sans-serif;
      }
      body {
        margin: 0;
        min-height: 100vh;
        display: flex;
        justify-content: center;
        align-items: center;
        background: radial-gradient(circle at top, #2b2540, #121018 70%);
        color: #f5f1e6;
      }
      main {
        background: rgba(255, 255, 255, 0.06);
        border: 1px solid rgba(250, 204, 21, 0.2);
        border-radius: 1.25rem;
        padding: 1.5rem;
        width: min(360px, 92vw);
      }
      label { display: block; font-size: 0.8rem; margin-top: 0.75rem; }
      input, select, button { font: inherit; }
      input, select { width: 100%; box-sizing: border-box; padding: 0.4rem; }
      .controls { display: flex; gap: 0.5rem; margin-top: 1rem; }
      .controls button { flex: 1; padding: 0.5rem; border-radius: 0.5rem; cursor: pointer; }
      .board {
        display: grid;
        grid-template-columns: repeat(3, 1fr);
        gap: 0.5rem;
        margin-top: 1rem;
      }
      .cell {
        height: 90px;
        font-size: 2.5rem;
        font-weight: 700;
        border-radius: 0.75rem;
        border: 1px solid rgba(250, 204, 21, 0.15);
        background: rgba(255, 255, 255, 0.04);
        color: inherit;
        cursor: pointer;
      }
      .cell.win { background: rgba(250, 204, 21, 0.3); }
      #status { margin-top: 1rem; text-align: center; min-height: 1.5em; }
    </style>
  </head>
  <body>
    <main>
      <h1>Tic Tac Toe</h1>
      <label for=\"name\">Your name</label>
      <input id=\"name\" placeholder=\"Enter your name\" maxlength=\"40\" />
      <label for=\"difficulty\">Difficulty</label>
      <select id=\"difficulty\">
        <option value=\"easy\">Easy</option>
        <option value=\"medium\" selected>Medium</option>
        <option value=\"hard\">Hard</option>
      </select>
      <div class=\"controls\">
        <button id=\"start\">Start</button>
        <button id=\"round\">New Round</button>
        <button id=\"reset\">Reset</button>
      </div>
      <div class=\"board\" id=\"board\"></div>
      <div id=\"status\">Enter your name and press Start.</div>
    </main>
    <script>
      const boardEl = document.getElementById('board');
      const statusEl = document.getElementById('status');
      const nameInput = document.getElementById('name');
      const difficultySelect = document.getElementById('difficulty');
      let gameState = null;
      let pollTimer = null;

      async function call(method, url, body) {
        const response = await fetch(url, {
          method,
          headers: { 'Content-Type': 'application/json' },
          body: body ? JSON.stringify(body) : undefined,
        });
        const payload = await response.json();
        if (!response.ok) {
          throw new Error(payload.detail || 'Request failed');
        }
        return payload;
      }

      function render() {
        boardEl.innerHTML = '';
        const cells = gameState ? gameState.board : Array(9).fill('');
        const line = gameState && gameState.winningLine ? gameState.winningLine : [];
        cells.forEach((value, index) => {
          const cell = document.createElement('button');
          cell.className = 'cell' + (line.includes(index) ? ' win' : '');
          cell.textContent = value;
          cell.addEventListener('click', () => play(index));
          boardEl.appendChild(cell);
        });
        statusEl.textContent = gameState ? gameState.message : 'Enter your name and press Start.';
      }

      function schedulePoll() {
        clearTimeout(pollTimer);
        if (gameState && gameState.aiPending) {
          pollTimer = setTimeout(async () => {
            gameState = await call('GET', `/api/game/${gameState.id}`);
            render();
            schedulePoll();
          }, 200);
        }
      }

      async function play(index) {
        if (!gameState || gameState.status !== 'in_progress' || gameState.aiPending) {
          return;
        }
        try {
          gameState = await call('POST', `/api/game/${gameState.id}/move`, { cellIndex: index });
        } catch (error) {
          statusEl.textContent = error.message;
          return;
        }
        render();
        schedulePoll();
      }

      document.getElementById('start').addEventListener('click', async () => {
        if (gameState) {
          await call('DELETE', `/api/game/${gameState.id}`);
        }
        gameState = await call('POST', '/api/game', {
          name: nameInput.value,
          difficulty: difficultySelect.value,
        });
        render();
      });

      document.getElementById('round').addEventListener('click', async () => {
        if (!gameState) {
          return;
        }
        try {
          gameState = await call('POST', `/api/game/${gameState.id}/round`);
        } catch (error) {
          statusEl.textContent = error.message;
          return;
        }
        render();
      });

      document.getElementById('reset').addEventListener('click', async () => {
        if (gameState) {
          await call('DELETE', `/api/game/${gameState.id}`);
        }
        gameState = null;
        nameInput.value = '';
        render();
      });

      difficultySelect.addEventListener('change', async () => {
        if (!gameState) {
          return;
        }
        gameState = await call('POST', `/api/game/${gameState.id}/difficulty`, {
          difficulty: difficultySelect.value,
        });
        render();
      });

      render();
    </script>
  </body>
</html>
"""
