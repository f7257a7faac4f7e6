from __future__ import annotations

import argparse
import sys
import uuid
from collections.abc import Sequence
from datetime import datetime

from kube_ir.foundation.config_io import DEFAULT_CONFIG_ENV_VAR, load_config
from kube_ir.foundation.logging_utils import close_logger, setup_operational_logger
from kube_ir.framework.config import RunConfig
from kube_ir.io import dump_ir, load_ir
from kube_ir.optimize import get_pass_registry, optimize_ir
from kube_ir.translate import build_ir
from kube_ir.types.plan import load_plan
from passkit.engine.pipeline import ALLOWED_ON_ERROR


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="kube_ir", add_help=True)
    sub = parser.add_subparsers(dest="command", required=True)

    optimize = sub.add_parser("optimize", help="Run optimization passes over an IR")
    source = optimize.add_mutually_exclusive_group(required=True)
    source.add_argument("--plan", help="Plan YAML to seed the IR from")
    source.add_argument("--ir", help="IR YAML produced by an earlier run")
    optimize.add_argument("--out", help="Write the optimized IR here (default: stdout)")
    optimize.add_argument(
        "--config",
        help=f"Config YAML (default: ${DEFAULT_CONFIG_ENV_VAR} or config/config.yaml)",
    )
    optimize.add_argument(
        "--pass",
        dest="passes",
        action="append",
        help="Pass id, short name or tag:<tag> to run (repeatable; overrides optimize.passes)",
    )
    optimize.add_argument("--on-error", choices=ALLOWED_ON_ERROR, help="Override optimize.on_error")

    sub.add_parser("list-passes", help="List available optimization passes")

    return parser


def _generate_run_id() -> str:
    return f"{datetime.now().strftime('%Y%m%d_%H%M%S')}_{uuid.uuid4().hex[:8]}"


def list_passes() -> None:
    for row in get_pass_registry().describe():
        doc = row.get("doc") or ""
        print(f"{row['pass_id']}\t{doc}" if doc else row["pass_id"])


def run_optimize(args: argparse.Namespace) -> int:
    try:
        loaded = load_config(config_path=args.config)
        cfg, warnings = RunConfig.from_dict(loaded.data)
    except (OSError, TypeError, ValueError) as exc:
        print(f"kube_ir: invalid configuration: {exc}", file=sys.stderr)
        return 2

    run_id = _generate_run_id()
    logger, _log_file = setup_operational_logger(
        run_id, level=cfg.logging.level, log_dir=cfg.logging.log_dir
    )
    try:
        logger.debug("Config source=%s paths=%s", loaded.source, ", ".join(loaded.paths) or "<none>")
        for warning in warnings:
            logger.warning(warning)

        try:
            if args.plan:
                ir = build_ir(load_plan(args.plan))
            else:
                ir = load_ir(args.ir)
        except (OSError, ValueError) as exc:
            logger.error("Unable to load input: %s", exc)
            return 2

        passes = args.passes if args.passes else cfg.optimize.passes
        on_error = args.on_error or cfg.optimize.on_error
        try:
            result = optimize_ir(ir, logger=logger, passes=passes, on_error=on_error)
        except ValueError as exc:
            logger.error("Unable to optimize IR: %s", exc)
            return 2

        for error in result.errors:
            logger.warning("Pass failure: %s", error)

        if args.out:
            dump_ir(result.ir, args.out)
            logger.info("Wrote optimized IR to %s", args.out)
        else:
            sys.stdout.write(dump_ir(result.ir))

        return 0 if result.ok else 1
    finally:
        close_logger(logger)


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(list(argv) if argv is not None else None)

    if args.command == "optimize":
        return run_optimize(args)

    if args.command == "list-passes":
        list_passes()
        return 0

    raise AssertionError(f"Unhandled command: {args.command}")


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main(sys.argv[1:]))
