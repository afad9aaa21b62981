"""
Command-line interface for running a Python script under diagnostics.

The script runs in this interpreter as ``__main__`` while a diagnostic
session samples it. When the script finishes (normally, with SystemExit, or
with an exception) the report is printed as JSON or written to a file.

Usage:
    procdiag --interval 500 --threshold 200000000 my_job.py --job-arg
    python -m procdiag.cli.main --config diag.toml --output report.json my_job.py
"""

import argparse
import json
import logging
import runpy
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..config import DEFAULT_SECTION, load_toml_file, validate_session_config
from ..report import save_report
from ..session import DiagnosticSession
from ..storage import export_samples, samples_to_dataframe
from ..validation import ValidationError, handle_cli_error

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s"


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="procdiag",
        description="Run a Python script and report its memory, CPU and scheduling lag.",
    )
    parser.add_argument("script", type=str, help="Path of the Python script to run.")
    parser.add_argument(
        "script_args",
        nargs=argparse.REMAINDER,
        help="Arguments passed through to the script.",
    )
    parser.add_argument("-n", "--name", type=str, help="Session name. Defaults to the script name.")
    parser.add_argument("-i", "--interval", type=int, help="Sampling interval in milliseconds (default: 5000).")
    parser.add_argument("--threshold", type=int, help="Memory threshold in bytes that triggers alerts.")
    parser.add_argument("--target", type=int, help="Target memory consumption in bytes.")
    parser.add_argument(
        "--no-event-loop",
        action="store_true",
        help="Disable scheduling lag monitoring.",
    )
    parser.add_argument(
        "--lag-threshold",
        type=int,
        help="Log a warning when scheduling lag exceeds this many milliseconds.",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help=f"TOML file with session options under a [{DEFAULT_SECTION}] table.",
    )
    parser.add_argument("-o", "--output", type=Path, help="Write the JSON report here instead of stdout.")
    parser.add_argument(
        "--samples",
        type=Path,
        help="Export the raw samples to this file (.parquet or .csv).",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: INFO).",
    )
    return parser


def log_alert(payload: Dict[str, Any]) -> None:
    """Alert callback used by the CLI: report threshold crossings as warnings."""
    formatted = payload["memory"]["formatted"]
    logger.warning(
        f"[{payload['name']}] memory {formatted['current']} exceeds threshold {formatted['threshold']}"
    )


def _collect_options(args: argparse.Namespace) -> Dict[str, Any]:
    """Merge config-file options with command-line overrides."""
    options: Dict[str, Any] = {}
    if args.config:
        options.update(load_toml_file(args.config, "diagnostics configuration file").get(DEFAULT_SECTION, {}))

    overrides = {
        "name": args.name,
        "interval": args.interval,
        "threshold": args.threshold,
        "target": args.target,
        "monitor_event_loop": False if args.no_event_loop else None,
        "lag_threshold": args.lag_threshold,
    }
    options.update({key: value for key, value in overrides.items() if value is not None})
    options.setdefault("name", Path(args.script).stem)
    options["alert"] = log_alert
    return options


def run_script(script: Path, script_args: List[str]) -> int:
    """
    Execute ``script`` as ``__main__`` in this interpreter.

    Returns:
        The exit code the script finished with
    """
    saved_argv = sys.argv
    saved_path = list(sys.path)
    sys.argv = [str(script)] + list(script_args)
    sys.path.insert(0, str(script.resolve().parent))
    try:
        runpy.run_path(str(script), run_name="__main__")
        return 0
    except SystemExit as e:
        if e.code is None:
            return 0
        return e.code if isinstance(e.code, int) else 1
    except KeyboardInterrupt:
        logger.warning("Script interrupted, building report for the partial run.")
        return 130
    except Exception as e:
        logger.error(f"Script {script} raised {type(e).__name__}: {e}", exc_info=True)
        return 1
    finally:
        sys.argv = saved_argv
        sys.path[:] = saved_path


def main_cli(argv: Optional[List[str]] = None) -> int:
    """
    Main command-line entry point.

    Args:
        argv: Argument list, defaults to ``sys.argv[1:]``

    Returns:
        The script's exit code, or 1 when the session could not be configured
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.log_level)

    script = Path(args.script)
    if not script.is_file():
        logger.error(f"Script not found: {script}")
        return 1

    try:
        config = validate_session_config(_collect_options(args))
    except (ValidationError, FileNotFoundError) as e:
        handle_cli_error(
            error=e,
            context="session configuration",
            exit_code=1,
            logger=logger,
        )

    session = DiagnosticSession.from_config(config)
    session.start()
    try:
        exit_code = run_script(script, args.script_args)
    finally:
        report = session.report()

    summary = report["summary"]
    logger.info(
        f"Session '{report['name']}' finished in {summary['duration']}: "
        f"{summary['samples']} samples, peak memory {summary['peak_memory']}, "
        f"peak CPU {summary['peak_cpu']}, {summary['alerts']} alerts"
    )

    if args.samples:
        df = samples_to_dataframe(session.memory_samples, session.cpu_samples)
        path = export_samples(df, args.samples)
        logger.info(f"Samples exported to {path}")

    if args.output:
        save_report(report, args.output)
        logger.info(f"Report written to {args.output}")
    else:
        print(json.dumps(report, indent=2, default=str))

    return exit_code


if __name__ == "__main__":
    sys.exit(main_cli())
