from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
import sys
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from .paths import PathPolicy
from .ops.models import RowOpsRequest
from .runner import run_row_ops
from .types import OnConflictPolicy

logger = logging.getLogger(__name__)


class CliConfig(BaseModel):
    """Configuration for one ``exshift apply`` invocation."""

    xlsx_path: Path = Field(..., description="Workbook to edit.")
    ops_path: Path = Field(..., description="JSON file holding the op list.")
    sheet: str | None = Field(default=None, description="Default sheet for ops.")
    out_dir: Path | None = Field(default=None, description="Output directory.")
    out_name: str | None = Field(default=None, description="Output file name.")
    on_conflict: OnConflictPolicy = Field(
        default="rename", description="Output conflict policy."
    )
    dry_run: bool = Field(default=False, description="Apply without writing.")
    root: Path | None = Field(default=None, description="Restrict paths to root.")
    deny_globs: list[str] = Field(default_factory=list, description="Denied globs.")
    log_level: str = Field(default="WARNING", description="Logging level.")
    log_file: Path | None = Field(default=None, description="Optional log file path.")


def main(argv: list[str] | None = None) -> int:
    """Run the ``exshift`` command line.

    Args:
        argv: Optional CLI arguments for testing.

    Returns:
        Exit code (0 for success, 1 for failure).
    """
    config = _parse_args(argv)
    _configure_logging(config)
    try:
        request = _build_request(config)
        policy = (
            PathPolicy(root=config.root, deny_globs=config.deny_globs)
            if config.root is not None
            else None
        )
        result = run_row_ops(request, policy=policy)
    except (OSError, ValueError, ValidationError) as exc:
        logger.error("exshift failed: %s", exc)
        return 1
    sys.stdout.write(result.model_dump_json(indent=2) + "\n")
    return 0 if result.error is None else 1


def _build_request(config: CliConfig) -> RowOpsRequest:
    """Load the op file and build the runner request."""
    payload = json.loads(config.ops_path.read_text(encoding="utf-8"))
    ops: Any = payload.get("ops") if isinstance(payload, dict) else payload
    sheet = config.sheet
    if sheet is None and isinstance(payload, dict):
        sheet = payload.get("sheet")
    if not isinstance(ops, list):
        raise ValueError(f"Ops file must hold a list of ops: {config.ops_path}")
    return RowOpsRequest.model_validate(
        {
            "xlsx_path": config.xlsx_path,
            "ops": ops,
            "sheet": sheet,
            "out_dir": config.out_dir,
            "out_name": config.out_name,
            "on_conflict": config.on_conflict,
            "dry_run": config.dry_run,
        }
    )


def _parse_args(argv: list[str] | None) -> CliConfig:
    """Parse CLI arguments into a config object."""
    parser = argparse.ArgumentParser(
        prog="exshift", description="Structural row edits for Excel workbooks."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    apply_parser = subparsers.add_parser("apply", help="Apply row ops to a workbook.")
    apply_parser.add_argument("xlsx_path", type=Path, help="Workbook path.")
    apply_parser.add_argument(
        "--ops", dest="ops_path", type=Path, required=True, help="Ops JSON file."
    )
    apply_parser.add_argument("--sheet", help="Default sheet for ops without one.")
    apply_parser.add_argument("--out-dir", type=Path, help="Output directory.")
    apply_parser.add_argument("--out-name", help="Output file name.")
    apply_parser.add_argument(
        "--on-conflict",
        choices=["overwrite", "skip", "rename"],
        default="rename",
        help="Output conflict policy (overwrite/skip/rename).",
    )
    apply_parser.add_argument(
        "--dry-run", action="store_true", help="Apply ops without writing."
    )
    apply_parser.add_argument("--root", type=Path, help="Workspace root.")
    apply_parser.add_argument(
        "--deny-glob",
        action="append",
        default=[],
        help="Glob pattern to deny (can be specified multiple times).",
    )
    apply_parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (DEBUG, INFO, WARNING, ERROR).",
    )
    apply_parser.add_argument("--log-file", type=Path, help="Optional log file path.")
    args = parser.parse_args(argv)
    return CliConfig(
        xlsx_path=args.xlsx_path,
        ops_path=args.ops_path,
        sheet=args.sheet,
        out_dir=args.out_dir,
        out_name=args.out_name,
        on_conflict=args.on_conflict,
        dry_run=bool(args.dry_run),
        root=args.root,
        deny_globs=list(args.deny_glob),
        log_level=args.log_level,
        log_file=args.log_file,
    )


def _configure_logging(config: CliConfig) -> None:
    """Configure logging for the CLI process."""
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if config.log_file is not None:
        handlers.append(logging.FileHandler(config.log_file))
    logging.basicConfig(
        level=config.log_level.upper(),
        handlers=handlers,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
