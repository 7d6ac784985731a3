"""Command-line interface router for contract-impact."""

from __future__ import annotations

import argparse
import json
import sys
import uuid
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from datetime import UTC, datetime
from pathlib import Path, PurePosixPath
from typing import Any, Final

from contract_impact.config import (
    LOG_LEVELS,
    ConfigLoadError,
    ConfigValidationError,
    dump_effective_config,
    load_config,
)
from contract_impact.contracts import validate_contract_structure
from contract_impact.diffing import classify
from contract_impact.document import parse_document
from contract_impact.notifications import (
    NotificationBuildError,
    render_notifications,
    write_notifications,
)
from contract_impact.observability import correlation_scope, setup_logging, shutdown_logging
from contract_impact.pipeline import (
    DocumentCategory,
    PipelineResult,
    PipelineSettings,
    classify_document_path,
    run_contract_pipeline,
    run_design_pipeline,
)

DESIGN_SUFFIXES: Final[frozenset[str]] = frozenset({".md", ".markdown"})


class CLIError(RuntimeError):
    """Typed CLI failure with an explicit process exit code."""

    def __init__(self, message: str, exit_code: int = 1) -> None:
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse command router for all supported CLI workflows."""

    parser = argparse.ArgumentParser(
        prog="contract-impact",
        description=(
            "contract-impact — interface contract change detection and notification.\n\n"
            "Common workflows:\n"
            "  contract-impact diff old.yaml new.yaml        Show changes and impact\n"
            "  contract-impact notify old.yaml new.yaml \\\n"
            "      --path contracts/interfaces/orders.yaml  Render notifications\n"
            "  contract-impact validate new.yaml             Check a new contract\n"
            "  contract-impact config                        Show effective config\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        dest="config_path",
        default=None,
        help="Path to TOML config (default: ./contract_impact.toml if present).",
    )
    common.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        default=False,
        help="Mirror JSON log lines to stderr.",
    )
    common.add_argument(
        "--log-level",
        dest="log_level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=None,
        help="Override observability.log_level for this run.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # diff ----------------------------------------------------------------
    diff_parser = subparsers.add_parser(
        "diff",
        parents=[common],
        help="Detect changes between two snapshots of a document",
        description=(
            "Compare two snapshots of an interface contract or design-system document.\n\n"
            "Examples:\n"
            "  contract-impact diff old.yaml new.yaml\n"
            "  contract-impact diff old.md new.md --path contracts/standards/design-system.md\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    diff_parser.add_argument("old", help="Previous snapshot (empty file for a new document)")
    diff_parser.add_argument("new", help="Current snapshot")
    diff_parser.add_argument(
        "--path",
        dest="document_path",
        default=None,
        help="Repository-relative path of the document (default: NEW as given).",
    )
    diff_parser.add_argument("--json", action="store_true", help="Emit machine-readable JSON.")
    diff_parser.set_defaults(handler=_cmd_diff)

    # notify --------------------------------------------------------------
    notify_parser = subparsers.add_parser(
        "notify",
        parents=[common],
        help="Build notifications for a snapshot pair",
        description=(
            "Build the notifications a change produces and print them as YAML documents.\n\n"
            "Examples:\n"
            "  contract-impact notify old.yaml new.yaml --path contracts/interfaces/a.yaml\n"
            "  contract-impact notify old.yaml new.yaml --path contracts/interfaces/a.yaml \\\n"
            "      --write-dir .\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    notify_parser.add_argument("old", help="Previous snapshot (empty file for a new document)")
    notify_parser.add_argument("new", help="Current snapshot")
    notify_parser.add_argument(
        "--path",
        dest="document_path",
        required=True,
        help="Repository-relative path recorded in each notification.",
    )
    notify_parser.add_argument(
        "--timestamp",
        default=None,
        help="ISO-8601 change timestamp (default: now, UTC).",
    )
    notify_parser.add_argument(
        "--write-dir",
        default=None,
        help="Write notifications under this directory at their storage paths.",
    )
    notify_parser.set_defaults(handler=_cmd_notify)

    # validate ------------------------------------------------------------
    validate_parser = subparsers.add_parser(
        "validate",
        parents=[common],
        help="Validate the structure of a new interface contract",
    )
    validate_parser.add_argument("file", help="Interface contract document")
    validate_parser.add_argument("--json", action="store_true", help="Emit machine-readable JSON.")
    validate_parser.set_defaults(handler=_cmd_validate)

    # config --------------------------------------------------------------
    config_parser = subparsers.add_parser(
        "config",
        parents=[common],
        help="Show effective configuration",
        description=(
            "Display the effective config after merging defaults, file, env and flags.\n\n"
            "Examples:\n"
            "  contract-impact config\n"
            "  contract-impact config --log-level debug\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    config_parser.set_defaults(handler=_cmd_config)

    return parser


# ---------------------------------------------------------------------------
# Entrypoints
# ---------------------------------------------------------------------------


def run_cli(argv: Sequence[str] | None = None) -> int:
    """Parse argv, route to a command handler, and return process exit code."""

    parser = build_parser()
    namespace = parser.parse_args(list(argv) if argv is not None else None)
    handler = getattr(namespace, "handler", None)
    if not callable(handler):
        parser.print_help(sys.stderr)
        return 2

    try:
        config = _load_effective_config(namespace)
        with _command_logging(namespace, config):
            result = handler(namespace, config)
    except CLIError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return exc.exit_code
    return int(result)


def main(argv: Sequence[str] | None = None) -> int:
    """Compatibility wrapper for main-module wiring."""

    return run_cli(argv)


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


def _cmd_diff(args: argparse.Namespace, config: Mapping[str, Any]) -> int:
    document_path = _optional_str(getattr(args, "document_path", None)) or str(args.new)
    result = _run_pipeline(args, config, document_path, timestamp=None)

    if _flag(args, "json"):
        _emit_json({"command": "diff", "file": document_path, **result.to_dict()})
        return 0

    print(f"{document_path} [{_category_text(result)}]")
    if result.validation is not None:
        _print_validation(result.validation.issues)
        return 0
    if not result.changes:
        print("No changes detected.")
        return 0
    for change in result.changes:
        verdict = classify(change)
        marker = "BREAKING" if verdict.breaking else "INFO"
        print(f"- [{marker}] {verdict.label}: {change.field}")
    if result.impact is not None:
        domains = ", ".join(result.impact.affected_domains) or "(none)"
        print(f"Affected consumers: {domains}")
    for target in result.design_targets:
        print(f"Design target {target.category.value}: {', '.join(target.roles)}")
    return 0


def _cmd_notify(args: argparse.Namespace, config: Mapping[str, Any]) -> int:
    document_path = _require_str(getattr(args, "document_path", None), "path")
    timestamp = _optional_str(getattr(args, "timestamp", None))
    result = _run_pipeline(args, config, document_path, timestamp=timestamp)
    notifications = list(result.notifications)

    if notifications:
        sys.stdout.write(render_notifications(notifications))

    write_dir = _optional_str(getattr(args, "write_dir", None))
    if write_dir is not None and notifications:
        storage_root = PurePosixPath(PipelineSettings.from_config(config).storage_root)
        written = write_notifications(notifications, Path(write_dir), storage_root=storage_root)
        for path in written:
            print(f"wrote {path}", file=sys.stderr)
    if not notifications:
        print("No notifications.", file=sys.stderr)
    return 0


def _cmd_validate(args: argparse.Namespace, config: Mapping[str, Any]) -> int:
    del config
    path = _existing_file(args.file)
    validation = validate_contract_structure(parse_document(_read_text(path)))

    if _flag(args, "json"):
        _emit_json(
            {
                "command": "validate",
                "file": str(args.file),
                "valid": validation.valid,
                "issues": list(validation.issues),
            }
        )
    else:
        _print_validation(validation.issues)
    return 0 if validation.valid else 1


def _cmd_config(args: argparse.Namespace, config: Mapping[str, Any]) -> int:
    del args
    print(dump_effective_config(config))
    return 0


# ---------------------------------------------------------------------------
# Rendering helpers
# ---------------------------------------------------------------------------


def _emit_json(payload: Mapping[str, object]) -> None:
    """Emit a JSON payload to stdout with deterministic formatting."""

    print(json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False))


def _print_validation(issues: Sequence[str]) -> None:
    if not issues:
        print("Contract structure is valid.")
        return
    print("Contract structure is invalid:")
    for issue in issues:
        print(f"- {issue}")


def _category_text(result: PipelineResult) -> str:
    return result.category.value if result.category is not None else "unwatched"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_effective_config(args: argparse.Namespace) -> dict[str, Any]:
    config_path = _optional_str(getattr(args, "config_path", None))
    try:
        return load_config(
            config_path,
            cli_overrides={"observability.log_level": getattr(args, "log_level", None)},
        )
    except (ConfigLoadError, ConfigValidationError) as exc:
        raise CLIError(str(exc), exit_code=2) from exc


@contextmanager
def _command_logging(args: argparse.Namespace, config: Mapping[str, Any]) -> Iterator[None]:
    observability = config.get("observability", {})
    run_id = f"{datetime.now(UTC):%Y%m%dT%H%M%SZ}-{uuid.uuid4().hex[:8]}"
    handle = setup_logging(
        observability,
        run_id=run_id,
        log_to_stdout=True if _flag(args, "verbose") else None,
    )
    try:
        with correlation_scope(correlation_id=run_id):
            yield
    finally:
        shutdown_logging(handle)


def _run_pipeline(
    args: argparse.Namespace,
    config: Mapping[str, Any],
    document_path: str,
    *,
    timestamp: str | None,
) -> PipelineResult:
    settings = PipelineSettings.from_config(config)
    old_text = _read_text(_existing_file(args.old))
    new_text = _read_text(_existing_file(args.new))
    category = _resolve_category(document_path, settings)
    runner = (
        run_contract_pipeline if category is DocumentCategory.INTERFACE else run_design_pipeline
    )

    try:
        with correlation_scope(file_path=document_path, category=category.value):
            return runner(
                old_text,
                new_text,
                document_path,
                timestamp=timestamp,
                settings=settings,
            )
    except NotificationBuildError as exc:
        raise CLIError(str(exc), exit_code=2) from exc


def _resolve_category(document_path: str, settings: PipelineSettings) -> DocumentCategory:
    """Watched globs decide first; otherwise Markdown is design and anything else interface."""

    category = classify_document_path(document_path, settings)
    if category is not None:
        return category
    if PurePosixPath(document_path.replace("\\", "/")).suffix.lower() in DESIGN_SUFFIXES:
        return DocumentCategory.DESIGN
    return DocumentCategory.INTERFACE


def _existing_file(raw: object) -> Path:
    path = Path(_require_str(raw, "file")).expanduser()
    if not path.is_file():
        raise CLIError(f"file not found: {path}", exit_code=2)
    return path


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise CLIError(f"unable to read {path}: {exc}", exit_code=2) from exc


def _require_str(value: object, name: str) -> str:
    if not isinstance(value, str):
        raise CLIError(f"invalid {name}: expected string", exit_code=2)
    if not value.strip():
        raise CLIError(f"invalid {name}: value cannot be empty", exit_code=2)
    return value


def _optional_str(value: object) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise CLIError("invalid optional string argument", exit_code=2)
    return value if value.strip() else None


def _flag(args: argparse.Namespace, name: str) -> bool:
    return bool(getattr(args, name, False))


__all__ = ["CLIError", "build_parser", "main", "run_cli"]
