from __future__ import annotations

import argparse
import sys
import time
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from tradein_ingest.config.loader import ConfigError, IngestConfig, load_config_or_default
from tradein_ingest.logging.error_log import ErrorLogBuffer
from tradein_ingest.logging.init import log_summary, set_debug, setup_logging
from tradein_ingest.models.error_record import UPLOAD_VALIDATION_ERROR, ErrorRecord
from tradein_ingest.models.records import TradeIn
from tradein_ingest.models.upload import FileType
from tradein_ingest.parsing.batch import FILE_ERROR_PREFIX
from tradein_ingest.services.lead_time import lead_time_metrics
from tradein_ingest.services.progress import ProgressTracker
from tradein_ingest.services.summary import RunSummary, render_summary_line
from tradein_ingest.services.trends import aggregate_trends
from tradein_ingest.services.upload import (
    UploadOutcome,
    UploadValidationError,
    process_upload,
    validate_bid_upload,
    validate_library_upload,
    validate_trade_in_upload,
)

"""CLI entrypoint.

Commands:
- library FILE                 parse a model-library workbook
- trade-ins FILE ...           parse a supplier trade-in batch
- bids FILE ...                parse a customer bid sheet
- trends FILE... ...           parse trade-in batches and report price trends

Nothing is written anywhere except the log output and the error log file;
the run reports whether the upload would be committable under the configured
commit policy.

Exit codes:
- 0 every row normalized
- 2 row errors present
- 1 fatal (config, upload request, missing or unreadable workbook)
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1

# Supplier recorded on trend batches when --supplier is not given
DEFAULT_TREND_SUPPLIER = "unassigned"

# Sheet label for errors raised before a workbook is opened
REQUEST_SHEET_LABEL = "<REQUEST>"


class ProcessingError(Exception):
    """Fatal CLI-level error such as a missing input file."""


@dataclass
class _RunTotals:
    files: int = 0
    records: int = 0
    errors: int = 0
    committable: bool = True
    fatal: bool = False

    def add(self, outcome: UploadOutcome) -> None:
        self.files += 1
        self.records += outcome.parse.row_count
        self.errors += len(outcome.errors)
        self.committable = self.committable and outcome.committable
        self.fatal = self.fatal or any(e.startswith(FILE_ERROR_PREFIX) for e in outcome.errors)


def _load_env_file(path: Path, override: bool = False) -> None:
    """Load .env so TRADEIN_INGEST_CONFIG can be set per checkout."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="tradein-ingest",
        description="Trade-in spreadsheet ingestion and price trend reporting",
    )
    p.add_argument("--config", type=Path, default=None, help="YAML config (default config/ingest.yml)")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    library = sub.add_parser("library", help="Parse a model-library workbook")
    library.add_argument("file", type=Path)

    trade_ins = sub.add_parser("trade-ins", help="Parse a supplier trade-in batch")
    trade_ins.add_argument("file", type=Path)
    trade_ins.add_argument("--supplier", help="Supplier ID")
    trade_ins.add_argument("--currency", help="NZD, USD or AUD")
    trade_ins.add_argument("--purchase-date", default=None, help="Bulk purchase date (YYYY-MM-DD)")

    bids = sub.add_parser("bids", help="Parse a customer bid sheet")
    bids.add_argument("file", type=Path)
    bids.add_argument("--customer", help="Customer ID")
    bids.add_argument("--auction-date", help="Auction date (YYYY-MM-DD)")
    bids.add_argument("--currency", help="USD or AUD")

    trends = sub.add_parser("trends", help="Report price trends across trade-in batches")
    trends.add_argument("files", type=Path, nargs="+")
    trends.add_argument("--currency", help="NZD, USD or AUD")
    trends.add_argument("--supplier", default=DEFAULT_TREND_SUPPLIER, help="Supplier ID")
    return p.parse_args(argv)


def _check_input(path: Path) -> None:
    if not path.is_file():
        raise ProcessingError(f"file not found: {path}")


def _run_upload(args: argparse.Namespace, cfg: IngestConfig, error_log: ErrorLogBuffer) -> _RunTotals:
    logger = setup_logging()
    path: Path = args.file
    if args.command == "library":
        validate_library_upload(path.name)
        kind, context = FileType.MODEL_LIBRARY, None
    elif args.command == "trade-ins":
        kind = FileType.TRADE_INS
        context = validate_trade_in_upload(path.name, args.supplier, args.currency, args.purchase_date)
    else:
        kind = FileType.CUSTOMER_BIDS
        context = validate_bid_upload(path.name, args.customer, args.auction_date, args.currency)
    _check_input(path)

    logger.info(f"Parsing {kind.value} workbook: {path}")
    outcome = process_upload(path, kind, context, cfg, error_log=error_log)
    for error in outcome.errors:
        logger.warning(error)

    totals = _RunTotals()
    totals.add(outcome)
    return totals


def _run_trends(args: argparse.Namespace, cfg: IngestConfig, error_log: ErrorLogBuffer) -> _RunTotals:
    logger = setup_logging()
    totals = _RunTotals()
    trade_ins: list[TradeIn] = []

    with ProgressTracker(len(args.files), description="Parsing batches") as progress:
        for path in args.files:
            progress.start_file(path)
            context = validate_trade_in_upload(path.name, args.supplier, args.currency)
            _check_input(path)
            outcome = process_upload(path, FileType.TRADE_INS, context, cfg, error_log=error_log)
            for error in outcome.errors:
                logger.warning(f"{path.name}: {error}")
            trade_ins.extend(outcome.records)
            totals.add(outcome)
            progress.set_postfix(records=len(trade_ins), errors=totals.errors)
            progress.finish_file()

    for trend in aggregate_trends(trade_ins):
        change = "n/a" if trend.price_change_percent is None else f"{trend.price_change_percent:+.1f}%"
        logger.info(
            f"trend {trend.model_grade} platform={trend.platform.value} volume={trend.total_volume} "
            f"batches={len(trend.batches)} avg={trend.average_price:.2f} current={trend.current_price:.2f} "
            f"change={change} volatility={trend.price_volatility:.2f}"
        )
    metrics = lead_time_metrics(trade_ins)
    logger.info(
        f"lead_time booked_to_auction={metrics.average_days_booked_to_auction} "
        f"auction_to_sold={metrics.average_days_auction_to_sold} "
        f"booked_to_sold={metrics.average_total_lead_time}"
    )
    return totals


def _flush_error_log(error_log: ErrorLogBuffer) -> None:
    logger = setup_logging()
    try:
        path = error_log.flush()
    except OSError as e:
        logger.warning(f"error log not written: {e}")
        return
    if path is not None:
        logger.info(f"error log: {path}")


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # Only read the process arguments when none were passed (tests call main([...]))
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"))

    if args.debug:
        set_debug(True)
        logger.debug("debug mode enabled")

    try:
        cfg = load_config_or_default(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    error_log = ErrorLogBuffer(cfg.log_dir)
    start = time.perf_counter()
    try:
        if args.command == "trends":
            totals = _run_trends(args, cfg, error_log)
        else:
            totals = _run_upload(args, cfg, error_log)
    except UploadValidationError as e:
        files = args.files if args.command == "trends" else [args.file]
        error_log.append(ErrorRecord.create(
            file=", ".join(f.name for f in files),
            sheet=REQUEST_SHEET_LABEL,
            row=-1,
            error_type=UPLOAD_VALIDATION_ERROR,
            message=str(e),
        ))
        logger.error(f"upload: {e}")
        _flush_error_log(error_log)
        return EXIT_FATAL
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        _flush_error_log(error_log)
        return EXIT_FATAL

    _flush_error_log(error_log)

    summary_line = render_summary_line(RunSummary(
        command=args.command,
        files=totals.files,
        records=totals.records,
        errors=totals.errors,
        committable=totals.committable,
        elapsed_seconds=time.perf_counter() - start,
    ))
    # log_summary adds the "SUMMARY " label itself
    log_summary(summary_line[len("SUMMARY "):])

    if totals.fatal:
        return EXIT_FATAL
    if totals.errors:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
