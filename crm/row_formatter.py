import re
from datetime import datetime
from typing import Dict, Iterable, List, Optional
import logging

from crm.log import build_default_logger
from crm.models import CustomerRecord, UserLocation, UserName

PHONE_RE = re.compile(r"(\d{3})(\d{3})(\d{4})")


class CustomerRowFormatter:
    # Project customer records onto the columns of the customer table.

    AGE_RANGES = [
        (25, "18-24"),
        (35, "25-34"),
        (45, "35-44"),
        (55, "45-54"),
        (65, "55-64"),
    ]
    OLDEST_RANGE = "65+"
    MISSING = "N/A"

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or build_default_logger(self.__class__.__name__)

    def format_rows(self, records: Iterable[CustomerRecord]) -> List[Dict[str, str]]:
        rows = [self._format_row(r) for r in records]
        self.logger.debug("Formatted %d customer rows", len(rows))
        return rows

    def _format_row(self, record: CustomerRecord) -> Dict[str, str]:
        return {
            "id": record.id,
            "full_name": self._full_name(record.name),
            "username": f"@{record.username}" if record.username else self.MISSING,
            "initials": self._initials(record.name),
            "email": record.email,
            "phone": self._format_phone(record.phone),
            "location": self._format_location(record.location),
            "age_range": self._age_range(record.age),
            "customer_since": self._format_date(record.registered.date),
            "thumbnail": record.picture.thumbnail,
        }

    def _full_name(self, name: UserName) -> str:
        return " ".join(p for p in (name.title, name.first, name.last) if p)

    def _initials(self, name: UserName) -> str:
        return f"{name.first[:1]}{name.last[:1]}".upper()

    def _format_phone(self, phone: str) -> str:
        # only the first 10-digit run is rewritten, punctuation is kept as-is
        if not phone:
            return self.MISSING
        return PHONE_RE.sub(r"(\1) \2-\3", phone, count=1)

    def _format_location(self, location: UserLocation) -> str:
        return f"{location.city}, {location.state}, {location.country}"

    def _age_range(self, age: Optional[int]) -> str:
        """Bucket an age into the ranges shown on the list screen."""
        if age is None:
            return self.MISSING
        for upper, label in self.AGE_RANGES:
            if age < upper:
                return label
        return self.OLDEST_RANGE

    def _format_date(self, value: Optional[datetime]) -> str:
        if value is None:
            return self.MISSING
        return f"{value:%b} {value.day}, {value.year}"
