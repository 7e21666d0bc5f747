"""
Status Board Service

Listing, submission and deletion of status records.

Listing fetches one row past the page size to learn whether a next page
exists, so no count query is needed.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

from iamsafe.core.db import is_postgres_mode, sql_placeholder
from iamsafe.core.errors import (
    MissingRecordIdError,
    StoreUnavailableError,
    SubmissionValidationError,
)
from iamsafe.i18n.messages import STATUS_LABELS
from iamsafe.models.status import StatusSubmission
from iamsafe.services.db_helpers import db_cursor

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20
DEFAULT_MAX_QUERY_LEN = 200
REQUIRED_FIELDS = ("name", "status")
FALLBACK_STATUS = "Other"
LIKE_ESCAPE = "\\"
# Signed 64-bit range of SQL INTEGER columns and OFFSET values
SQL_INT_MIN = -(2**63)
SQL_INT_MAX = 2**63 - 1

LIST_SQL = """
SELECT id, name, location, status, message, created_at
FROM safety_checks
ORDER BY created_at DESC, id DESC
LIMIT {ph} OFFSET {ph}
"""

SEARCH_SQL = """
SELECT id, name, location, status, message, created_at
FROM safety_checks
WHERE name LIKE {ph} ESCAPE '\\'
   OR location LIKE {ph} ESCAPE '\\'
   OR status LIKE {ph} ESCAPE '\\'
   OR id_number LIKE {ph} ESCAPE '\\'
ORDER BY created_at DESC, id DESC
LIMIT {ph} OFFSET {ph}
"""

INSERT_SQL = """
INSERT INTO safety_checks (name, id_number, location, status, message, ip_address)
VALUES ({ph}, {ph}, {ph}, {ph}, {ph}, {ph})
"""

DELETE_SQL = "DELETE FROM safety_checks WHERE id = {ph}"


@dataclass
class StatusRecord:
    """A check-in as shown on the board (ID number and IP are never read back)."""

    id: int
    name: str
    location: str | None
    status: str
    message: str | None
    created_at: datetime | None

    @classmethod
    def from_row(cls, row: tuple[Any, ...]) -> "StatusRecord":
        record_id, name, location, status, message, created_at = row
        return cls(
            id=int(record_id),
            name=name,
            location=location,
            status=status,
            message=message,
            created_at=_parse_timestamp(created_at),
        )

    @property
    def status_key(self) -> str:
        """Known status value used for the badge; anything else is Other."""
        return self.status if self.status in STATUS_LABELS else FALLBACK_STATUS


@dataclass
class BoardPage:
    records: list[StatusRecord]
    page: int
    page_size: int
    has_next: bool
    query: str = ""
    # Message key of the banner to show, if listing failed
    error: str | None = None

    @property
    def has_prev(self) -> bool:
        return self.page > 1


def _parse_timestamp(value: Any) -> datetime | None:
    """Normalize a stored timestamp (datetime or SQLite text) to aware UTC."""
    if value is None:
        return None
    if isinstance(value, datetime):
        ts = value
    else:
        try:
            ts = datetime.fromisoformat(str(value))
        except ValueError:
            logger.warning(f"Unparseable created_at value: {value!r}")
            return None
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so the term matches literally."""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def parse_record_id(raw: Any) -> int:
    """Parse a submitted record identifier.

    Raises:
        MissingRecordIdError: If the value is absent, not an integer, or
            outside the range an id column can hold.
    """
    if raw is None or str(raw).strip() == "":
        raise MissingRecordIdError()
    try:
        record_id = int(str(raw).strip())
    except ValueError:
        raise MissingRecordIdError(f"invalid record id {raw!r}")
    if not SQL_INT_MIN <= record_id <= SQL_INT_MAX:
        raise MissingRecordIdError("record id out of range")
    return record_id


class StatusBoardService:
    def __init__(
        self,
        db_path: str,
        page_size: int = DEFAULT_PAGE_SIZE,
        max_query_len: int = DEFAULT_MAX_QUERY_LEN,
    ):
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self.db_path = db_path
        self.page_size = page_size
        self.max_query_len = max_query_len

    @property
    def max_page(self) -> int:
        """Highest page whose OFFSET still fits the store's integer range."""
        return SQL_INT_MAX // self.page_size + 1
        # Highest page whose OFFSET still fits the store's integer range
        self.max_page = SQL_INT_MAX // page_size + 1

    def normalize_query(self, query: str | None) -> str:
        """Strip and truncate a search term; empty means no filter."""
        term = (query or "").strip()
        return term[: self.max_query_len]

    def list_page(self, query: str | None = None, page: int = 1) -> BoardPage:
        """
        Return one page of records, newest first.

        Database failures are logged and degrade to an empty page carrying
        the ``err_db`` banner instead of raising.
        """
        page = min(max(int(page), 1), self.max_page)
        term = self.normalize_query(query)
        limit = self.page_size + 1
        offset = (page - 1) * self.page_size
        ph = sql_placeholder()

        if term:
            pattern = f"%{escape_like(term)}%"
            sql = SEARCH_SQL.format(ph=ph)
            params: tuple[Any, ...] = (pattern, pattern, pattern, pattern, limit, offset)
        else:
            sql = LIST_SQL.format(ph=ph)
            params = (limit, offset)

        try:
            with db_cursor(self.db_path) as (_, cursor):
                cursor.execute(sql, params)
                rows = cursor.fetchall()
        except Exception:
            logger.exception(f"Failed to list status records (page={page})")
            return BoardPage(
                records=[],
                page=page,
                page_size=self.page_size,
                has_next=False,
                query=term,
                error="err_db",
            )

        return BoardPage(
            records=[StatusRecord.from_row(row) for row in rows[: self.page_size]],
            page=page,
            page_size=self.page_size,
            has_next=len(rows) > self.page_size,
            query=term,
        )

    def submit(
        self,
        *,
        name: str | None,
        status: str | None,
        location: str | None = None,
        id_number: str | None = None,
        message: str | None = None,
        ip_address: str = "unknown",
    ) -> int:
        """
        Validate and insert a check-in.

        Returns the new record id.

        Raises:
            SubmissionValidationError: Required field empty or a field too long.
            StoreUnavailableError: The insert failed.
        """
        try:
            submission = StatusSubmission(
                name=name or "",
                status=status or "",
                location=location,
                id_number=id_number,
                message=message,
            )
        except ValidationError as e:
            fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err["loc"])
            logger.info(f"Rejected submission: invalid fields {fields}")
            raise SubmissionValidationError(fields, message_key="err_invalid")

        missing = submission.missing_fields(REQUIRED_FIELDS)
        if missing:
            logger.info(f"Rejected submission: missing {', '.join(missing)}")
            raise SubmissionValidationError(", ".join(missing))

        ph = sql_placeholder()
        params = (
            submission.name,
            submission.id_number,
            submission.location,
            submission.status,
            submission.message,
            ip_address,
        )
        try:
            with db_cursor(self.db_path) as (conn, cursor):
                if is_postgres_mode():
                    cursor.execute(INSERT_SQL.format(ph=ph) + " RETURNING id", params)
                    record_id = cursor.fetchone()[0]
                else:
                    cursor.execute(INSERT_SQL.format(ph=ph), params)
                    record_id = cursor.lastrowid
                conn.commit()
        except Exception as e:
            logger.exception("Failed to save status record")
            raise StoreUnavailableError(str(e), message_key="err_save") from e

        logger.info(f"Saved status record {record_id} ({submission.status})")
        return int(record_id)

    def delete(self, record_id: Any) -> int:
        """
        Delete at most one record by id. Returns rows affected.

        A missing record is not an error; 0 is returned.

        Raises:
            MissingRecordIdError: No usable id supplied.
            StoreUnavailableError: The delete failed.
        """
        record_id = parse_record_id(record_id)
        logger.info(f"Attempting to delete record ID: {record_id}")

        try:
            with db_cursor(self.db_path) as (conn, cursor):
                cursor.execute(DELETE_SQL.format(ph=sql_placeholder()), (record_id,))
                changes = cursor.rowcount
                conn.commit()
        except Exception as e:
            logger.exception(f"Failed to delete record {record_id}")
            raise StoreUnavailableError(str(e), message_key="err_delete") from e

        if changes:
            logger.info(f"Deleted record {record_id}")
        else:
            logger.info(f"Delete of record {record_id} affected no rows")
        return max(changes, 0)
