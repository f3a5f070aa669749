"""
Donation Buffer Service

Holds the most recent donations in memory and answers cursor-based polls.

Polling protocol:
- No cursor: the client has never polled, send the whole buffer
- Cursor found: send everything after it (nothing if it is the newest)
- Cursor not found: the buffer was reset or the id aged out, so the server
  cannot tell what the client has seen and resends the whole buffer. The
  client filters replays by timestamp.

The buffer lives for the lifetime of the process and is lost on restart.
"""

import re
import threading
from decimal import Decimal, InvalidOperation
from typing import Dict, Any, List, Optional, Tuple

from donation_relay.config import get_settings
from donation_relay.models.donations import DonationRecord
from donation_relay.utils.exceptions import ConfigurationException
from donation_relay.utils.logging_config import get_logger

logger = get_logger(__name__)


# Decimal literal as accepted by JavaScript Number(); no underscores, no hex
NUMERIC_CURSOR = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


def _as_number(value: str) -> Optional[Decimal]:
    text = value.strip()
    if not NUMERIC_CURSOR.match(text):
        return None
    try:
        return Decimal(text)
    except InvalidOperation:
        return None


def ids_match(record_id: str, cursor: str, numeric_id: bool = False) -> bool:
    """
    Loose id comparison.

    String ids match only the identical cursor. An id the provider sent as a
    JSON number also matches a cursor holding the same number ("100.0" or
    "1e2" for 100). Values compare exactly, so large ids never collide
    through float rounding.
    """
    if record_id == cursor:
        return True
    if not numeric_id:
        return False
    record_number = _as_number(record_id)
    cursor_number = _as_number(cursor)
    if record_number is None or cursor_number is None:
        return False
    return record_number == cursor_number


class DonationBuffer:
    """
    Bounded, insertion-ordered buffer of DonationRecord.

    append() and read_since() each run under one lock so a poll never scans
    a list that is being evicted from.
    """

    def __init__(self, max_size: int = 100):
        if max_size < 1:
            raise ConfigurationException(
                "Donation buffer max_size must be at least 1",
                details={"max_size": max_size},
            )
        self.max_size = max_size
        self._records: List[DonationRecord] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def append(self, record: DonationRecord) -> int:
        """
        Append a donation, evicting the oldest records beyond max_size.

        Args:
            record: Normalized donation record

        Returns:
            Number of records evicted
        """
        with self._lock:
            self._records.append(record)
            overflow = len(self._records) - self.max_size
            if overflow > 0:
                del self._records[:overflow]
            size = len(self._records)

        evicted = max(overflow, 0)
        logger.info(
            "Donation buffered",
            extra={
                "donation_id": record.id,
                "buffer_size": size,
                "evicted": evicted,
            },
        )
        return evicted

    def read_since(
        self, after_id: Optional[str] = None
    ) -> Tuple[List[DonationRecord], Optional[str]]:
        """
        Return donations the client has not seen yet and its next cursor.

        Args:
            after_id: Id of the last donation the client processed, if any

        Returns:
            (donations, latest_id). latest_id is the id of the last returned
            donation, or of the newest buffered one when nothing is returned,
            or None when the buffer is empty.
        """
        with self._lock:
            if not self._records:
                return [], None

            index = None
            if after_id:
                index = next(
                    (
                        i
                        for i, record in enumerate(self._records)
                        if ids_match(record.id, after_id, record.id_is_numeric)
                    ),
                    -1,
                )

            if index is None or index == -1:
                donations = list(self._records)
            else:
                donations = self._records[index + 1:]

            latest_id = donations[-1].id if donations else self._records[-1].id
            buffer_size = len(self._records)

        if index == -1:
            logger.info(
                "Cursor not in buffer, resending all donations",
                extra={
                    "after_id": after_id,
                    "buffer_size": buffer_size,
                    "resync": True,
                },
            )

        logger.debug(
            "Donations read",
            extra={
                "after_id": after_id,
                "returned": len(donations),
                "latest_id": latest_id,
            },
        )
        return donations, latest_id

    def get_stats(self) -> Dict[str, Any]:
        """Buffer size, capacity and newest id for health reporting"""
        with self._lock:
            size = len(self._records)
            latest_id = self._records[-1].id if self._records else None
        return {
            "size": size,
            "max_size": self.max_size,
            "latest_id": latest_id,
        }


# Singleton instance
_donation_buffer_instance: Optional[DonationBuffer] = None
_instance_lock = threading.Lock()


def get_donation_buffer() -> DonationBuffer:
    """Get or create the process-wide DonationBuffer"""
    global _donation_buffer_instance
    if _donation_buffer_instance is None:
        with _instance_lock:
            if _donation_buffer_instance is None:
                _donation_buffer_instance = DonationBuffer(
                    max_size=get_settings().buffer_max_size
                )
    return _donation_buffer_instance
