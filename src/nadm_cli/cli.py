# nadm — Embedded Shell Script Launcher
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
nadm console entry points.

Design:
- ``nadm`` (main): the launcher. No argument parsing; everything after the
  program name is forwarded to core.sh through NADM_ARGS.
- ``nadm-build`` (build_main): embeds core.sh into the launcher module, or
  into another target given on the command line.
- Unexpected exceptions are appended to the crash log before exiting 1.
"""

from __future__ import annotations

import argparse
import sys
import traceback
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

from . import config
from . import embedder
from .launcher import launch
from .ui import ConsoleUI


def write_crash_log(
    error: Exception,
    command: str = "",
    argv: Sequence[str] = (),
    target: Path | None = None,
) -> Path | None:
    """Write an entry to the crash log.

    Only creates the log directory when actually needed.
    Appends to crash.log (never overwrites).
    Returns the log path, or None if it could not be written.
    """
    try:
        crash_log = config.crash_log_path(config.get_data_root())

        # Create logs directory only when we need to write
        crash_log.parent.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().isoformat()
        lines = [
            f"{timestamp}",
            f"command={command}",
        ]

        if argv:
            lines.append(f"argv={' '.join(argv)}")
        if target:
            lines.append(f"target={target}")

        lines.append(f"error={type(error).__name__}: {error}")
        lines.append("traceback:")
        lines.append(traceback.format_exc())
        lines.append("----")

        with crash_log.open("a", encoding="utf-8") as f:
            f.write("\n".join(lines) + "\n")

    except Exception:
        # Already failing; a crash log we cannot write is not reported
        return None

    return crash_log


def _report_crash(error: Exception, command: str, argv: Sequence[str]) -> None:
    """Log an unhandled exception and tell the user under the CRASH tag."""
    log_path = write_crash_log(error, command=command, argv=argv)
    message = f"Unhandled exception: {type(error).__name__}: {error}"
    if log_path is not None:
        message += f" (details in {log_path})"
    ConsoleUI().error(message, tag="CRASH")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nadm-build",
        description="Embed core.sh into the nadm launcher as a string literal.",
    )
    parser.add_argument(
        "--source",
        type=Path,
        default=None,
        help="Script to embed (default: core.sh beside the launcher)",
    )
    parser.add_argument(
        "--target",
        type=Path,
        default=None,
        help="File holding the placeholder (default: nadm_cli/launcher.py)",
    )
    parser.add_argument(
        "--style",
        choices=sorted(embedder.STYLES),
        default=None,
        help="Literal syntax of the target (default: from file suffix, then system.yaml)",
    )
    parser.add_argument(
        "--placeholder",
        default=None,
        help="Placeholder token to replace (default: from system.yaml)",
    )
    return parser


def run_build(
    argv: Sequence[str],
    cfg: config.YAMLConfig | None = None,
    ui: ConsoleUI | None = None,
) -> int:
    """Run the build step and return an exit status."""
    args = _build_parser().parse_args(list(argv))
    if cfg is None:
        cfg = config.load_system_config()
    if ui is None:
        ui = ConsoleUI(cfg)

    settings = config.launcher_settings(cfg)
    source = args.source or settings.fallback_path
    target = args.target or config.launcher_module_path()
    placeholder = args.placeholder or settings.placeholder

    try:
        style = embedder.get_style(args.style) if args.style else None
        report = embedder.build(
            source,
            target,
            placeholder,
            style=style,
            default_style=cfg.embed.get("default_style"),
        )
    except embedder.EmbedError as e:
        ui.error(f"Build failed: {e}")
        return 1

    ui.info(
        "BUILD",
        f"Build complete: {report.source.name} embedded into "
        f"{report.target.name} ({report.style}, "
        f"{report.source_chars:,} chars)",
    )
    return 0


def build_main() -> None:
    """Entry point for nadm-build."""
    argv = sys.argv[1:]
    try:
        code = run_build(argv)
    except Exception as e:
        _report_crash(e, "nadm-build", argv)
        code = 1
    sys.exit(code)


def main() -> None:
    """Entry point for the nadm launcher."""
    argv = sys.argv[1:]
    try:
        code = launch(argv)
    except Exception as e:
        _report_crash(e, "nadm", argv)
        code = 1
    sys.exit(code)
