# src/dcsim_core/cli.py
"""
Command line entry point: ``dcsim -i circuit.cir [-o output.log] [-v]``.

The tool parses and analyzes one netlist, writes a banner plus the full report to
the output file and prints a completion line. A solve that does not converge still
produces a report and exits with status 0; build and analysis errors exit with 1.
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .circuit_builder import CircuitBuilder
from .errors import DCSimError
from .log_config import setup_logging
from .reporting import render_report
from .simulation.config import ConfigParsingError, RunConfig, SolverConfig, load_run_config
from .simulation.execution import run_dc_analysis

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_FILE = "output.log"
DEFAULT_CLI_LOG_LEVEL = "WARNING"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dcsim",
        description="DC operating point analysis of a SPICE-like netlist (MNA + modified Gauss-Seidel).",
    )
    parser.add_argument("-i", "--input", required=True, type=Path, help="input netlist file")
    parser.add_argument(
        "-o", "--output", type=Path, default=Path(DEFAULT_OUTPUT_FILE),
        help=f"output results file (default: {DEFAULT_OUTPUT_FILE})",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="also print the report to stdout")
    parser.add_argument("-c", "--config", type=Path, help="YAML file with solver and logging settings")
    parser.add_argument("--max-iter", type=int, help="maximum number of Gauss-Seidel sweeps")
    parser.add_argument("--tolerance", type=float, help="absolute residual tolerance")
    parser.add_argument("--damping", type=float, help="damping factor in (0, 1]")
    parser.add_argument(
        "--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], type=str.upper,
        help=f"logging level (default: {DEFAULT_CLI_LOG_LEVEL})",
    )
    parser.add_argument("--show-mna", action="store_true", help="include the assembled MNA system in the report")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def banner() -> str:
    title = f"DCSim Core v{__version__}"
    subtitle = "MNA DC Operating Point"
    width = max(len(title), len(subtitle)) + 6
    return "\n".join([
        "+" + "=" * width + "+",
        "|" + title.center(width) + "|",
        "|" + subtitle.center(width) + "|",
        "+" + "=" * width + "+",
        "",
        "",
    ])


def _resolve_config(args: argparse.Namespace) -> RunConfig:
    run_config = load_run_config(args.config) if args.config else RunConfig(solver=SolverConfig())
    solver = run_config.solver.with_overrides(
        max_iter=args.max_iter, tolerance=args.tolerance, damping_factor=args.damping
    )
    return RunConfig(solver=solver, log_level=run_config.log_level)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        run_config = _resolve_config(args)
    except ConfigParsingError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    setup_logging(args.log_level or run_config.log_level or DEFAULT_CLI_LOG_LEVEL)
    solver_config = run_config.solver
    logger.info(f"Solver settings: {solver_config}")

    try:
        circuit = CircuitBuilder().build_from_file(args.input)
        op_point = run_dc_analysis(circuit, solver_config)
        system = op_point.mna_system if args.show_mna else None
    except DCSimError as e:
        print(str(e), file=sys.stderr)
        return 1

    report = render_report(circuit, op_point, solver_config, system)
    try:
        args.output.write_text(banner() + report, encoding="utf-8")
    except OSError as e:
        print(f"Error: Could not open output file: {args.output} ({e})", file=sys.stderr)
        return 1

    if args.verbose:
        print(report)
    if not op_point.converged:
        print(f"Warning: solver did not converge within {solver_config.max_iter} iterations.", file=sys.stderr)
    print(f"Circuit analysis complete. Results written to: {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
