"""chatllm - chat with OpenAI-compatible LLMs from a chat platform.

Entry point for the application.
Usage:
    python -m chatllm.main                      # Start the interactive console
    python -m chatllm.main --init               # Write the default config
    python -m chatllm.main --model kimi         # Override the default model
    python -m chatllm.main --config path.yaml   # Use another config file
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import sys
from pathlib import Path

import structlog

from chatllm import __version__
from chatllm.config import ChatLLMConfig, load_config, save_default_config
from chatllm.core.chat import ChatService
from chatllm.core.models.registry import ModelRegistry
from chatllm.core.sessions import ConversationRouter
from chatllm.render.template import CardRenderer

logger = structlog.get_logger()


def setup_logging(level: int = 20) -> None:
    """Configure structured logging."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer() if sys.stderr.isatty() else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def build_service(config: ChatLLMConfig) -> ChatService:
    """Wire the registry, router and renderer into a ChatService."""
    registry = ModelRegistry.from_config(config)
    router = ConversationRouter(config.interaction)
    renderer = CardRenderer(config.render)
    return ChatService(config, registry, router=router, renderer=renderer)


async def sweep_history(registry: ModelRegistry, interval: int) -> None:
    """Periodically drop conversations that have gone idle."""
    while True:
        await asyncio.sleep(interval)
        removed = registry.sweep()
        if removed:
            logger.info("history_sweep_done", removed=removed)


async def async_main(config: ChatLLMConfig) -> None:
    """Run the console adapter until the user quits."""
    from chatllm.ui.cli import ConsoleAdapter

    service = build_service(config)
    adapter = ConsoleAdapter(service, config)

    sweeper: asyncio.Task | None = None
    if config.history_sweep_interval > 0:
        sweeper = asyncio.create_task(
            sweep_history(service.registry, config.history_sweep_interval)
        )

    try:
        await adapter.start()
    finally:
        await adapter.stop()
        if sweeper is not None:
            sweeper.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await sweeper


def main() -> None:
    """Parse command line arguments and run."""
    parser = argparse.ArgumentParser(
        prog="chatllm",
        description="Chat with OpenAI-compatible LLMs.",
    )
    parser.add_argument(
        "--init",
        action="store_true",
        help="Write the default config file and exit",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to the config file (default: ~/.chatllm/config.yaml)",
    )
    parser.add_argument(
        "--model",
        default=None,
        help="Default model for this run (chatgpt, kimi, claude)",
    )
    parser.add_argument(
        "--interaction",
        choices=["user", "channel", "both"],
        default=None,
        help="How conversations are shared",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    args = parser.parse_args()
    setup_logging(10 if args.debug else 20)

    if args.init:
        path = save_default_config(args.config)
        print(f"Config written to {path}")
        return

    config = load_config(args.config)
    if args.model:
        config.default_model = args.model
    if args.interaction:
        config.interaction = args.interaction

    try:
        asyncio.run(async_main(config))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
