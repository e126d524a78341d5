"""Entry point — wires CLI args → Config → OpenAICaptioner → caption output."""
import asyncio
import logging
from typing import Optional, Sequence

from rich.console import Console
from rich.logging import RichHandler

from vlm_captioner.captioner import OpenAICaptioner
from vlm_captioner.cli import parse_args, run
from vlm_captioner.config import Config


def _setup_logging(level: str) -> None:
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.WARNING))
    list(map(root.removeHandler, root.handlers[:]))
    # stdout carries captions / CSV, so logs go to stderr
    root.addHandler(RichHandler(console=Console(stderr=True), rich_tracebacks=True))


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    config = Config.from_env()
    _setup_logging(config.log_level)

    captioner = OpenAICaptioner.configure(
        config.openai_api_key,
        base_url=config.openai_base_url,
        model=config.openai_model,
    )
    asyncio.run(
        run(
            captioner,
            args.images,
            csv_output=args.csv,
            timeout=config.caption_timeout,
        )
    )


if __name__ == "__main__":
    main()
