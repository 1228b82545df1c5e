"""
Command-line entry point: `movie-browser` / `python -m mvb_backend`.
"""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional, Sequence

from aiohttp import web
from dotenv import load_dotenv

from mvb_shared import get_logger, log_success

from .app import create_app
from .config import BrowserConfig, load_config

logger = get_logger(__name__)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="movie-browser",
        description="Serve a directory of movies with catalog metadata and range streaming.",
    )
    parser.add_argument("--media-dir", type=Path, default=None, help="Directory holding the video files")
    parser.add_argument("--host", default=None, help="Bind address (default: MVB_HOST or 0.0.0.0)")
    parser.add_argument("--port", type=int, default=None, help="Bind port (default: MVB_PORT or 4000)")
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Load environment variables from this file (default: ./.env when present)",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> BrowserConfig:
    if args.env_file is not None:
        load_dotenv(args.env_file, override=False)
    else:
        load_dotenv(override=False)
    return load_config(media_dir=args.media_dir, host=args.host, port=args.port)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    config = build_config(args)
    try:
        app = create_app(config)
    except RuntimeError as exc:
        logger.error("%s", exc)
        return 1

    log_success(logger, f"Serving {config.media_dir} on http://{config.host}:{config.port}")
    web.run_app(app, host=config.host, port=config.port, print=None)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
