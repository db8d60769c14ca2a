"""Local launcher: serve the API, or play one scenario headless."""

import argparse

import uvicorn

from infra.logger import configure_logging, get_logger


def _run_headless(path: str | None, wall: bool) -> None:
    from arena.scenario import Scenario, create_open_field_scenario, create_wall_scenario
    from game_runner import GameRunner

    log = get_logger(__name__)
    if path:
        scenario = Scenario.load_json(path)
    else:
        scenario = create_wall_scenario() if wall else create_open_field_scenario()

    runner = GameRunner(scenario)
    frame = runner.run()
    world = runner.state["world"]
    log.info(
        "Finished after %d turns: winner=%s (%s)",
        frame.world.turn,
        world.winner.name if world.winner else "none",
        world.game_over_reason,
    )


def main():
    parser = argparse.ArgumentParser(description="Run the skirmish arena backend.")
    parser.add_argument("--host", default="127.0.0.1", help="Host to bind (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=8000, help="Port for the API (default: 8000)")
    parser.add_argument(
        "--reload",
        dest="reload",
        action="store_true",
        default=False,
        help="Enable auto-reload for development",
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    parser.add_argument("--plain-logs", action="store_true", help="Human-readable console logs instead of JSON")
    parser.add_argument("--headless", action="store_true", help="Play one game in-process instead of serving the API")
    parser.add_argument("--scenario", help="Scenario JSON to play with --headless")
    parser.add_argument("--wall", action="store_true", help="Use the built-in wall scenario with --headless")
    args = parser.parse_args()

    # Configure logging once at startup (console + file).
    configure_logging(level=args.log_level, json=not args.plain_logs)
    log = get_logger(__name__)

    if args.headless:
        _run_headless(args.scenario, args.wall)
        return

    url = f"http://{args.host}:{args.port}"
    log.info("Starting skirmish backend at %s", url)
    uvicorn.run(
        "api.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level.lower(),
    )


if __name__ == "__main__":
    main()
