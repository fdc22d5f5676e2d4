#!/usr/bin/env python
"""Main entry point for Postinator: render a post or stats image to a file."""
from __future__ import annotations

import argparse
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import List, Optional

from postinator import config
from postinator.assets import load_asset_bundle
from postinator.constants import APP_NAME, CONFIG_FILE, LOG_FORMAT
from postinator.errors import ConfigError, PostinatorError
from postinator.exporter import output_path_for
from postinator.models import RenderJob, RenderMode
from postinator.reporting import ReportingClient, StatsService
from postinator.service import RenderService


def setup_logging(log_file: Optional[str] = None, verbose: bool = False) -> logging.Logger:
    """Console logging, plus a rotating log file when ``log_file`` is set."""
    formatter = logging.Formatter(LOG_FORMAT)
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    root_logger.addHandler(console_handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file, maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        file_handler.setLevel(logging.DEBUG)
        root_logger.addHandler(file_handler)

    return logging.getLogger("postinator.app")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="postinator", description=f"{APP_NAME} image renderer")
    parser.add_argument("--config", default=CONFIG_FILE, help="path to the JSON config file")
    parser.add_argument("--log-file", default=None, help="also write logs to this rotating file")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug output on the console")
    parser.add_argument("--output", default=None, help="output image path (PNG, or JPEG by extension)")

    sub = parser.add_subparsers(dest="mode", required=True)

    post = sub.add_parser("post", help="photo on the branded background with a caption")
    post.add_argument("photo", help="path to the user photo")
    post.add_argument("--caption", default="", help="caption drawn under the photo")

    stats = sub.add_parser("stats", help="monthly time-tracking stats image")
    stats.add_argument("title", help="title naming the period, e.g. 'ИЮНЬ 2024'")
    stats.add_argument("--photo", default="", help="optional user photo")
    return parser


def build_service(cfg: dict) -> RenderService:
    ok, error = config.ensure_directory(cfg["temp_dir"], auto_create=True)
    if not ok:
        raise ConfigError(f"temp directory unavailable: {error}", stage="startup")
    assets = load_asset_bundle(cfg)

    stats_service = None
    if cfg.get("reporting_token"):
        mappings, other = config.load_stats_mappings(cfg)
        client = ReportingClient(cfg["reporting_token"], int(cfg["reporting_workspace"]))
        stats_service = StatsService(client, mappings, other)
    return RenderService(assets, stats_service=stats_service, max_workers=1)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logger = setup_logging(args.log_file, args.verbose)

    try:
        cfg = config.load_main_config(args.config)
        service = build_service(cfg)
    except PostinatorError as exc:
        logger.critical("Startup failed: %s", exc)
        return 1

    if args.mode == "post":
        mode = RenderMode.POST
        job = RenderJob(
            photo_path=args.photo,
            caption=args.caption,
            output_path=args.output or output_path_for(args.photo, cfg["temp_dir"]),
        )
    else:
        mode = RenderMode.STATS
        job = RenderJob(
            photo_path=args.photo,
            caption=args.title,
            output_path=args.output or os.path.join(cfg["temp_dir"], "stats.png"),
        )

    try:
        output = service.run(os.getpid(), mode, job)
    except PostinatorError as exc:
        logger.error("Rendering failed: %s", exc)
        return 2
    finally:
        service.shutdown()

    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
