"""HTTP API entrypoint for driving a match step by step."""

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from agents import registered_agent_types
from arena.scenario import Scenario
from game_runner import GameRunner
from infra.logger import get_logger

logger = get_logger(__name__)

app = FastAPI(title="Skirmish Arena")
runner: GameRunner | None = None

# Allow a browser-based control panel (served from file:// or other origins)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


class StartRequest(BaseModel):
    scenario: dict
    world: dict | None = None


class StepRequest(BaseModel):
    injections: dict | None = None


@app.post("/start")
def start(request: StartRequest):
    global runner
    try:
        scenario = Scenario.from_dict(request.scenario)
        runner = GameRunner(scenario, world=request.world)
    except (ValueError, TypeError, KeyError) as exc:
        logger.warning("Rejected scenario: %s", exc)
        raise HTTPException(400, str(exc)) from exc
    return {"success": True, "frame": runner.current_frame().to_dict()}


@app.post("/step")
def step(request: StepRequest):
    if runner is None:
        raise HTTPException(400, "No active game")
    try:
        return runner.step(request.injections).to_dict()
    except RuntimeError as exc:
        raise HTTPException(400, str(exc)) from exc


@app.get("/status")
def status():
    if runner is None:
        return {"active": False, "agent_types": registered_agent_types()}
    world = runner.state["world"]
    return {
        "active": True,
        "turn": runner.turn,
        "done": runner.done,
        "winner": world.winner.name if world.winner else None,
        "reason": world.game_over_reason,
        "agent_types": registered_agent_types(),
    }
