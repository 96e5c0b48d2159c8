from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any

from ..config.loader import IngestConfig
from ..excel.reader import WorkbookSource
from ..logging.error_log import ErrorLogBuffer, records_from_errors
from ..models.contexts import BidContext, TradeInContext
from ..models.parse_result import ParseResult
from ..models.records import BID_CURRENCIES, Currency
from ..models.upload import CommitPolicy, FileType, UploadRecord, UploadStatus
from ..parsing.batch import FILE_ERROR_PREFIX, parse_workbook
from ..parsing.dates import InvalidDateError, to_date

"""Upload orchestration: precondition checks, parsing and the commit decision.

The parser reports every valid record and every rejected row; what may be
committed is decided here, by the configured CommitPolicy:

- ALL_OR_NOTHING: any error refuses the whole upload
- PARTIAL: valid rows are committable, rejected rows are reported

A file that cannot be read at all is refused under either policy.
"""

__all__ = [
    "EXCEL_SUFFIXES",
    "UploadValidationError",
    "UploadOutcome",
    "validate_library_upload",
    "validate_trade_in_upload",
    "validate_bid_upload",
    "process_upload",
]

logger = logging.getLogger(__name__)

EXCEL_SUFFIXES = (".xlsx", ".xls")

# Sheet label used in error records when no sheet name is configured
FIRST_SHEET_LABEL = "<FIRST_SHEET>"


class UploadValidationError(Exception):
    """Raised when an upload request is refused before any row is parsed."""


@dataclass(frozen=True)
class UploadOutcome:
    records: list[Any]  # records the caller may commit (empty when refused)
    parse: ParseResult[Any]  # full parser output, independent of the policy
    upload: UploadRecord

    @property
    def committable(self) -> bool:
        return self.upload.status is UploadStatus.COMPLETED

    @property
    def errors(self) -> list[str]:
        return self.parse.errors


def _check_file_name(file_name: str | None) -> str:
    if not file_name:
        raise UploadValidationError("No file provided")
    if not file_name.lower().endswith(EXCEL_SUFFIXES):
        raise UploadValidationError("Invalid file type. Please upload an Excel file (.xlsx or .xls)")
    return file_name


def _parse_currency(value: Currency | str | None) -> Currency | None:
    if isinstance(value, Currency):
        return value
    if not value:
        return None
    try:
        return Currency(str(value).strip().upper())
    except ValueError:
        return None


def validate_library_upload(file_name: str | None) -> None:
    _check_file_name(file_name)


def validate_trade_in_upload(
    file_name: str | None,
    supplier_id: str | None,
    currency: Currency | str | None,
    purchase_date: date | str | None = None,
) -> TradeInContext:
    """Check a trade-in upload request and build its context.

    Raises:
        UploadValidationError: missing/non-Excel file, missing supplier,
            missing or unknown currency, unreadable purchase date
    """
    name = _check_file_name(file_name)
    if not supplier_id or not str(supplier_id).strip():
        raise UploadValidationError("Supplier ID required")
    parsed_currency = _parse_currency(currency)
    if parsed_currency is None:
        raise UploadValidationError("Currency required (NZD, USD or AUD)")
    purchased = None
    if purchase_date is not None and purchase_date != "":
        try:
            purchased = to_date(purchase_date)
        except InvalidDateError as e:
            raise UploadValidationError(f"Invalid purchase date: {purchase_date!r}") from e
    return TradeInContext(
        supplier_id=str(supplier_id).strip(),
        currency=parsed_currency,
        purchase_date=purchased,
        batch_file_name=Path(name).name,
    )


def validate_bid_upload(
    file_name: str | None,
    customer_id: str | None,
    auction_date: date | str | None,
    currency: Currency | str | None,
) -> BidContext:
    """Check a customer bid upload request and build its context.

    Bids are only accepted in USD or AUD.

    Raises:
        UploadValidationError: missing/non-Excel file, missing customer,
            missing auction date, currency other than USD/AUD
    """
    _check_file_name(file_name)
    if not customer_id or not str(customer_id).strip():
        raise UploadValidationError("Customer ID required")
    try:
        auction = to_date(auction_date)
    except InvalidDateError as e:
        raise UploadValidationError("Auction date required") from e
    parsed_currency = _parse_currency(currency)
    if parsed_currency not in BID_CURRENCIES:
        raise UploadValidationError("Valid currency required (USD or AUD)")
    return BidContext(customer_id=str(customer_id).strip(), auction_date=auction, currency=parsed_currency)


def _decide(result: ParseResult[Any], policy: CommitPolicy) -> tuple[list[Any], UploadStatus]:
    if not result.errors:
        return list(result.records), UploadStatus.COMPLETED
    file_level = any(e.startswith(FILE_ERROR_PREFIX) for e in result.errors)
    if file_level or policy is CommitPolicy.ALL_OR_NOTHING or not result.records:
        return [], UploadStatus.FAILED
    return list(result.records), UploadStatus.COMPLETED


def process_upload(
    source: WorkbookSource,
    kind: FileType,
    context: TradeInContext | BidContext | None = None,
    config: IngestConfig | None = None,
    *,
    file_name: str | None = None,
    error_log: ErrorLogBuffer | None = None,
) -> UploadOutcome:
    """Parse one uploaded workbook and apply the commit policy.

    Nothing is persisted: the caller commits ``outcome.records`` (when
    ``outcome.committable``) and stores ``outcome.upload`` as history.
    Rejected rows are appended to ``error_log`` when given.
    """
    config = config or IngestConfig()
    result = parse_workbook(source, kind, context, config, file_name=file_name)
    if file_name is None:
        file_name = Path(source).name if isinstance(source, (str, Path)) else "<upload>"
    records, status = _decide(result, config.commit_policy)

    if error_log is not None and result.errors:
        error_log.extend(records_from_errors(file_name, config.sheet or FIRST_SHEET_LABEL, result.errors))

    trade_in = context if isinstance(context, TradeInContext) else None
    bid = context if isinstance(context, BidContext) else None
    upload = UploadRecord(
        file_name=file_name,
        file_type=kind,
        records_processed=len(records),
        status=status,
        supplier_id=trade_in.supplier_id if trade_in else None,
        customer_id=bid.customer_id if bid else None,
        purchase_date=trade_in.purchase_date if trade_in else None,
        auction_date=bid.auction_date if bid else None,
        error_count=len(result.errors),
        error_message="; ".join(result.errors) or None,
    )
    log = logger.info if status is UploadStatus.COMPLETED else logger.warning
    log(
        "upload file=%s kind=%s status=%s records=%d errors=%d policy=%s",
        file_name, kind.value, status.value, len(records), len(result.errors), config.commit_policy.value,
    )
    return UploadOutcome(records=records, parse=result, upload=upload)
