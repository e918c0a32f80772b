"""CLI entry point for newsdesk."""

import argparse
import asyncio
import sys

import orjson
import uvicorn

from newsdesk.config import get_settings
from newsdesk.core.exceptions import NewsdeskError, NoRecoverableStateError
from newsdesk.core.logging import get_logger, setup_logging
from newsdesk.pipeline.orchestrator import PipelineOrchestrator, RunResult
from newsdesk.pipeline.state import StateManager

logger = get_logger(__name__)


def _print_json(payload: object) -> None:
    sys.stdout.write(orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode() + "\n")


def _run(resume: bool) -> int:
    settings = get_settings()
    setup_logging(settings)

    try:
        orchestrator = PipelineOrchestrator.from_settings(settings)
        if resume:
            result: RunResult = asyncio.run(orchestrator.resume())
        else:
            result = asyncio.run(orchestrator.run())
    except NoRecoverableStateError as e:
        logger.error("Nothing to resume", error=e.message)
        return 1
    except NewsdeskError as e:
        logger.error("Pipeline could not start", error=e.message)
        return 1

    _print_json(result.model_dump(mode="json"))
    return 0 if result.success else 1


def _status() -> int:
    settings = get_settings()
    setup_logging(settings)

    state = StateManager(settings.state_file_path)
    try:
        loaded = state.load()
    except NewsdeskError as e:
        logger.error("State file unreadable", error=e.message)
        return 1

    info = state.get_recovery_info()
    _print_json(
        {
            "state_file": str(settings.state_file_path),
            "run": state.get_summary().model_dump(mode="json") if loaded else None,
            "recovery": info.model_dump(mode="json") if info else None,
        }
    )
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="newsdesk")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("run", help="Run the pipeline once")
    subparsers.add_parser("resume", help="Start over after an interrupted run")
    subparsers.add_parser("status", help="Show the persisted run state")

    serve = subparsers.add_parser("serve", help="Start the HTTP API and publish scheduler")
    serve.add_argument("--reload", action="store_true", help="Enable auto-reload")
    serve.add_argument("--host", default="0.0.0.0", help="Bind host")
    serve.add_argument("--port", type=int, default=8000, help="Bind port")

    args = parser.parse_args()

    if args.command == "serve":
        uvicorn.run(
            "newsdesk.main:app",
            host=args.host,
            port=args.port,
            reload=args.reload,
        )
        return

    if args.command == "status":
        sys.exit(_status())
    sys.exit(_run(resume=args.command == "resume"))


if __name__ == "__main__":
    main()
