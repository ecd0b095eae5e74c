"""Receivables and payables aging."""

import logging
from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from accountbook.database.base import Database
from accountbook.domain.currency import BASE_CURRENCY, convert_to_base, normalize_currency
from accountbook.domain.entities import (
    AgingBucket,
    AgingItem,
    AgingReport,
    AgingSummary,
    OpenItem,
    OpenItemKind,
)
from accountbook.domain.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

# (key, label, min_days, max_days)
BUCKETS: tuple[tuple[str, str, int, Optional[int]], ...] = (
    ("current", "Current (0-30)", 0, 30),
    ("days30", "31-60 Days", 31, 60),
    ("days60", "61-90 Days", 61, 90),
    ("days90_plus", "90+ Days", 91, None),
)


def days_outstanding(item_date: date, as_of: date) -> int:
    """Whole days between item_date and as_of, never negative."""
    return max(0, (as_of - item_date).days)


def bucket_key_for(days: int) -> str:
    """Return the key of the bucket a day count falls into."""
    for key, _label, min_days, max_days in BUCKETS:
        if days >= min_days and (max_days is None or days <= max_days):
            return key
    return BUCKETS[0][0]


def classify(items: Iterable[AgingItem], as_of: date) -> AgingReport:
    """Place items into aging buckets as of a date.

    Days outstanding are recomputed from each item's date and as_of, so the
    result depends only on the arguments. Amounts are summed as given and
    must already be in the base currency.
    """
    grouped: dict[str, list[AgingItem]] = {key: [] for key, *_ in BUCKETS}
    for item in items:
        days = days_outstanding(item.date, as_of)
        grouped[bucket_key_for(days)].append(replace(item, days_outstanding=days))

    buckets = {}
    for key, label, min_days, max_days in BUCKETS:
        bucket_items = tuple(grouped[key])
        buckets[key] = AgingBucket(
            key=key,
            label=label,
            min_days=min_days,
            max_days=max_days,
            items=bucket_items,
            total=sum((i.amount for i in bucket_items), Decimal("0")),
            count=len(bucket_items),
        )

    return AgingReport(
        as_of=as_of,
        current=buckets["current"],
        days30=buckets["days30"],
        days60=buckets["days60"],
        days90_plus=buckets["days90_plus"],
        total_outstanding=sum((b.total for b in buckets.values()), Decimal("0")),
        total_count=sum(b.count for b in buckets.values()),
    )


class AgingService:
    """Service for open items and the aging reports built from them."""

    def __init__(self, db: Database, strict_rates: bool = False):
        """Initialize aging service.

        Args:
            db: Database instance
            strict_rates: If True, unknown currencies raise MissingRateError
        """
        self.db = db
        self.strict_rates = strict_rates

    def add_open_item(
        self,
        kind: OpenItemKind,
        reference: str,
        document_date: date,
        amount: Decimal,
        currency: str = BASE_CURRENCY,
        party_name: Optional[str] = None,
        due_date: Optional[date] = None,
    ) -> OpenItem:
        """Record an outstanding invoice or payable.

        Raises:
            ValidationError: If reference is empty or amount is not positive
        """
        if not reference or not reference.strip():
            raise ValidationError("Reference is required")
        if amount <= 0:
            raise ValidationError("Amount must be positive")
        item_id = self.db.create_open_item(
            kind=OpenItemKind(kind),
            reference=reference.strip(),
            document_date=document_date,
            amount=amount,
            currency=normalize_currency(currency),
            party_name=party_name,
            due_date=due_date,
        )
        item = self.db.get_open_item(item_id)
        if item is None:
            raise NotFoundError(f"Open item {item_id} not found")
        return item

    def settle(self, item_id: int) -> None:
        """Mark an open item as settled so it leaves the aging report."""
        if self.db.get_open_item(item_id) is None:
            raise NotFoundError(f"Open item {item_id} not found")
        self.db.settle_open_item(item_id)
        logger.info("Open item %s settled", item_id)

    def list_open_items(self, kind: Optional[OpenItemKind] = None) -> list[OpenItem]:
        """List unsettled items, oldest first."""
        return self.db.list_open_items(kind=kind, include_settled=False)

    def to_aging_items(self, open_items: Iterable[OpenItem], as_of: date) -> list[AgingItem]:
        """Convert open items to base-currency aging items."""
        rates = {rate.currency_code: rate.rate_to_base for rate in self.db.list_exchange_rates()}
        items = []
        for open_item in open_items:
            items.append(
                AgingItem(
                    id=open_item.id,
                    reference=open_item.reference,
                    party_name=open_item.party_name,
                    date=open_item.aging_date,
                    days_outstanding=days_outstanding(open_item.aging_date, as_of),
                    amount=convert_to_base(
                        open_item.amount, open_item.currency, rates, strict=self.strict_rates
                    ),
                    currency=BASE_CURRENCY,
                )
            )
        return items

    def aging_report(self, kind: OpenItemKind, as_of: date) -> AgingReport:
        """Aging report for receivables or payables as of a date."""
        open_items = self.list_open_items(kind=kind)
        return classify(self.to_aging_items(open_items, as_of), as_of)

    def aging_summary(self, as_of: date) -> AgingSummary:
        """Receivables and payables aging together."""
        return AgingSummary(
            receivables=self.aging_report(OpenItemKind.RECEIVABLE, as_of),
            payables=self.aging_report(OpenItemKind.PAYABLE, as_of),
        )
