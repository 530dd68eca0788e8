from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path

from bomrecon.config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from bomrecon.excel.reader import TableReadError, read_table
from bomrecon.excel.writer import export_results
from bomrecon.logging.init import log_summary, set_debug, setup_logging
from bomrecon.logging.issue_log import IssueLogBuffer, issues_from_results
from bomrecon.models.config_models import CompareConfig
from bomrecon.services.orchestrator import JobError, run_job
from bomrecon.services.reconciler import ComparisonError, has_discrepancies
from bomrecon.services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- Load the job file (config/compare.yml unless --config is given)
- Read both BOMs, resolve column mappings, apply rules, compare
- Log the SUMMARY line, export the report, flush the issue log

Exit codes: 0 = BOMs agree, 2 = discrepancies found, 1 = fatal error.
"""

EXIT_NO_DIFFERENCES = 0
EXIT_FATAL = 1
EXIT_DIFFERENCES = 2


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="bomrecon", description="Compare a customer BOM against an ERP BOM")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="Job file (YAML)")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print headers & first rows of both BOMs then exit")
    p.add_argument("--aggregate", action="store_true", help="Group original rows by code before comparing")
    p.add_argument("--check-revision", action="store_true", help="Match on code + revision instead of code only")
    p.add_argument("--ignore-rules", action="store_true", help="Do not apply the rules workbook")
    p.add_argument("--output", type=Path, default=None, help="Report path (.xlsx, .csv or .tsv)")
    return p.parse_args(argv)


def _apply_overrides(cfg: CompareConfig, args: argparse.Namespace) -> CompareConfig:
    if args.aggregate:
        cfg = replace(cfg, aggregate=True)
    if args.check_revision:
        cfg = replace(cfg, ignore_revision=False)
    if args.ignore_rules:
        cfg = replace(cfg, ignore_rules=True)
    if args.output is not None:
        cfg = replace(cfg, output=str(args.output))
    return cfg


def _inspect_data(cfg: CompareConfig) -> int:
    for label, side in (("original", cfg.original), ("partial", cfg.partial)):
        try:
            table = read_table(Path(side.path), skip_rows=side.skip_rows, sheet=side.sheet)
        except (OSError, TableReadError, ValueError) as e:
            print(f"{label}: read_error: {e}")
            return EXIT_FATAL
        print(f"FILE ({label}): {table.name} cols={table.headers}")
        print("    sample_rows=", table.rows[:3])
    return EXIT_NO_DIFFERENCES


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # An explicit empty list (tests) must not fall back to sys.argv
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)

    if args.debug:
        set_debug(logger)
        logger.debug("debug mode enabled")

    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL
    cfg = _apply_overrides(cfg, args)

    if args.inspect_data:
        return _inspect_data(cfg)

    logger.info(f"Comparing {Path(cfg.original.path).name} against {Path(cfg.partial.path).name}")
    try:
        job = run_job(cfg)
    except JobError as e:
        logger.error(f"input: {e}")
        return EXIT_FATAL
    except ComparisonError as e:
        logger.error(f"mapping: {e}")
        return EXIT_FATAL

    logger.info(
        f"original_rows={job.original_rows} partial_rows={job.partial_rows} "
        f"rules={job.rules_applied} aggregate={cfg.aggregate} ignore_revision={cfg.ignore_revision}"
    )

    summary_line = render_summary_line(job.results)
    log_summary(summary_line[len("SUMMARY "):])  # log_summary adds the prefix

    if cfg.output:
        try:
            export_results(job.results, Path(cfg.output))
        except (OSError, ValueError) as e:
            logger.error(f"export: {e}")
            return EXIT_FATAL

    issues = IssueLogBuffer()
    issues.extend(issues_from_results(job.results, Path(cfg.original.path).name))
    if len(issues):
        logger.warning(f"{len(issues)} quantity value(s) could not be interpreted")
        issue_path = issues.flush()
        logger.info(f"issue log: {issue_path}")

    return EXIT_DIFFERENCES if has_discrepancies(job.results) else EXIT_NO_DIFFERENCES


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
