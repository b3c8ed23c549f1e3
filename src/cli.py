"""Command-line interface for prcgen."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from artifacts.write import derive_tree, generate_all
from settings.config import ConfigError, load_config, resolve_output_dir
from verify.verify import verify_determinism


def _add_common_paths(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Source root to scan for records (default: .)",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="prcgen")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log generated files and skipped modules",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate", help="Generate read_param implementations"
    )
    _add_common_paths(generate_parser)
    generate_parser.add_argument(
        "--out-dir",
        default=None,
        help="Output directory for generated modules (default: config output dir)",
    )

    check_parser = subparsers.add_parser(
        "check", help="Derive every record and report diagnostics without writing"
    )
    _add_common_paths(check_parser)

    verify_parser = subparsers.add_parser(
        "verify", help="Verify generated modules are up to date"
    )
    _add_common_paths(verify_parser)
    verify_parser.add_argument(
        "--out-dir",
        default=None,
        help="Directory holding generated modules (default: config output dir)",
    )

    return parser


def _resolve_out_dir(root: Path, out_dir: str | None) -> Path:
    if out_dir is None:
        config = load_config(root)
        return resolve_output_dir(root, config.output_dir)
    return Path(out_dir).expanduser().resolve()


def _report_diagnostics(diagnostics: list) -> None:
    for diagnostic in diagnostics:
        sys.stderr.write(f"{diagnostic.render()}\n")


def _handle_generate(root: Path, out_dir: str | None) -> int:
    resolved_out_dir = _resolve_out_dir(root, out_dir)
    report = generate_all(root=root, out_dir=resolved_out_dir)
    _report_diagnostics(report.diagnostics)
    return 0 if report.ok else 1


def _handle_check(root: Path) -> int:
    tree = derive_tree(root)
    _report_diagnostics(tree.diagnostics)
    return 0 if not tree.diagnostics else 1


def _handle_verify(root: Path, out_dir: str | None) -> int:
    resolved_out_dir = _resolve_out_dir(root, out_dir)
    try:
        result = verify_determinism(root=root, out_dir=resolved_out_dir)
    except (FileNotFoundError, NotADirectoryError) as exc:
        sys.stderr.write(f"out-dir: {resolved_out_dir}\n")
        sys.stderr.write(f"error: {exc}\n")
        return 2
    if not result.ok:
        for label, paths in (
            ("missing", result.missing),
            ("extra", result.extra),
            ("mismatches", result.mismatches),
        ):
            for path in paths:
                sys.stderr.write(f"{label}: {path}\n")
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    root = Path(args.root).expanduser().resolve()

    try:
        if args.command == "generate":
            return _handle_generate(root, args.out_dir)

        if args.command == "check":
            return _handle_check(root)

        if args.command == "verify":
            return _handle_verify(root, args.out_dir)
    except ConfigError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2

    raise AssertionError


if __name__ == "__main__":
    raise SystemExit(main())
