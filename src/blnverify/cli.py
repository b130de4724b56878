"""Command line interface.

Verify every chain in ``<HEX-TT>-<#FANIN>-<#STEPS>.bln``:

    bln verify 3 e8 3 1

Print a linear form of a function, if it is a threshold function:

    bln threshold 3 e8

Exit codes:
  - ``0``: success
  - ``2``: missing chain file or invalid arguments
"""

from __future__ import annotations

import argparse
import json
import logging
import pathlib
import sys

from blnverify import __version__
from blnverify.batch import chain_filename, verify_file
from blnverify.chain.verifier import ChainVerifier
from blnverify.core.config import SymmetryPolicy, VerifierConfiguration
from blnverify.core.logging import configure_loggers, getLogger, set_level
from blnverify.errors import ThresholdSolverError, TruthTableError
from blnverify.threshold.identification import is_threshold
from blnverify.threshold.solver import SolverOptions
from blnverify.truth_table import TruthTable

logger = getLogger("BLN")


def _positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {text!r}") from None
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {value}")
    return value


def _logger_level(text: str) -> tuple[str, str]:
    name, sep, level = text.partition("=")
    if not sep or not name or not level:
        raise argparse.ArgumentTypeError(f"expected LOGGER=LEVEL: {text!r}")
    if not isinstance(logging.getLevelName(level.upper()), int):
        raise argparse.ArgumentTypeError(f"unknown logging level: {level!r}")
    return name, level


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bln",
        description="Verify Boolean chains produced by exact synthesis.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--config",
        default=None,
        help="Path to an options.json file (default: ~/.blnverify/options.json).",
    )
    parser.add_argument(
        "--log-dir",
        default=None,
        help="Directory for the log file (default: log_dir from the configuration).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log why each rejected chain was rejected.",
    )
    parser.add_argument(
        "--log-level",
        action="append",
        default=[],
        type=_logger_level,
        metavar="LOGGER=LEVEL",
        help="Set the level of one logger, e.g. BLN.threshold=DEBUG (repeatable).",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    verify = sub.add_parser("verify", help="Verify all chains of a .bln file.")
    verify.add_argument("num_vars", metavar="#VARS", type=_positive_int)
    verify.add_argument("hex_tt", metavar="HEX-TT")
    verify.add_argument("fanin", metavar="#FANIN", type=_positive_int)
    verify.add_argument("steps", metavar="#STEPS", type=_positive_int)
    verify.add_argument(
        "-d",
        "--directory",
        default=".",
        help="Directory containing the chain file (default: current directory).",
    )
    verify.add_argument(
        "--symmetry-policy",
        choices=[p.value for p in SymmetryPolicy],
        default=None,
        help="Whether symmetry violations only get reported or reject the chain "
        "(default: symmetry_policy from the configuration, else informational).",
    )
    verify.add_argument(
        "--json",
        action="store_true",
        help="Print a machine-readable JSON summary.",
    )

    threshold = sub.add_parser(
        "threshold", help="Print a linear form if the function is a threshold function."
    )
    threshold.add_argument("num_vars", metavar="#VARS", type=_positive_int)
    threshold.add_argument("hex_tt", metavar="HEX-TT")
    return parser


def _run_verify(args: argparse.Namespace, config: VerifierConfiguration) -> int:
    policy = (
        SymmetryPolicy.parse(args.symmetry_policy)
        if args.symmetry_policy is not None
        else config.symmetry_policy
    )
    try:
        verifier = ChainVerifier.from_hex(
            args.num_vars, args.hex_tt, args.fanin, args.steps, policy
        )
    except TruthTableError as exc:
        print(f"[e] {exc}", file=sys.stderr)
        return 2

    path = pathlib.Path(args.directory) / chain_filename(
        args.hex_tt, args.fanin, args.steps
    )
    try:
        stats = verify_file(path, verifier)
    except FileNotFoundError:
        print(f"[e] chain file not found: {path}", file=sys.stderr)
        return 2
    stats.log_report()

    if args.json:
        data = {
            "file": str(path),
            "violations": stats.violations,
            "solutions": stats.solutions,
            "points": stats.points,
            "symmetry_violations": stats.symmetry_violations,
            "failures": dict(stats.failures_by_kind),
            "rejected": [
                {
                    "block": r.block,
                    "line": r.first_line,
                    "category": r.verdict.error.category,
                    "kind": str(r.verdict.kind),
                    "message": r.verdict.error.message,
                }
                for r in stats.rejected()
            ],
        }
        print(json.dumps(data, indent=2, sort_keys=True))
        return 0

    for line in stats.report():
        print(f"[i] {line}")
    return 0


def _run_threshold(args: argparse.Namespace, config: VerifierConfiguration) -> int:
    try:
        tt = TruthTable.from_hex(args.num_vars, args.hex_tt)
    except TruthTableError as exc:
        print(f"[e] {exc}", file=sys.stderr)
        return 2

    options = SolverOptions(timeout_ms=config.solver_timeout_ms, verbose=args.verbose)
    try:
        form = is_threshold(tt, options=options)
    except ThresholdSolverError as exc:
        print(f"[e] {exc}", file=sys.stderr)
        return 2

    if form is None:
        print("not a threshold function")
    else:
        print(form)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = VerifierConfiguration(args.config)
    log_dir = pathlib.Path(args.log_dir) if args.log_dir else config.log_dir
    configure_loggers(log_dir, verbose=args.verbose)
    for name, level in args.log_level:
        set_level(name, level)
    logger.debug("bln %s: %s", __version__, vars(args))

    if args.command == "verify":
        return _run_verify(args, config)
    return _run_threshold(args, config)


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
