"""Business Numbers — human-facing identifiers for loans, reservations and fines.

Invariants:
    - Format is PREFIX-YYYYMMDD-XXXXXX (six uppercase hex characters)
    - The date part is the UTC date of `at`
"""

import uuid
from datetime import datetime

TRANSACTION_PREFIX = "TXN"
RESERVATION_PREFIX = "RES"
FINE_PREFIX = "FINE"


def business_number(prefix: str, at: datetime) -> str:
    return f"{prefix}-{at:%Y%m%d}-{uuid.uuid4().hex[:6].upper()}"
