"""Currency conversion and exchange rate service."""

import logging
from decimal import Decimal
from typing import Mapping, Optional

from accountbook.database.base import Database
from accountbook.domain.entities import ExchangeRate
from accountbook.domain.errors import MissingRateError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

BASE_CURRENCY = "TZS"


def normalize_currency(currency_code: str) -> str:
    """Return an upper-cased, stripped currency code."""
    return currency_code.strip().upper()


def rate_for(
    currency_code: str, rates: Mapping[str, Decimal], *, strict: bool = False
) -> Decimal:
    """Return the rate converting currency_code into the base currency.

    The base currency is always 1. A currency missing from rates falls back
    to 1 unless strict is set, in which case MissingRateError is raised.
    """
    code = normalize_currency(currency_code)
    if code == BASE_CURRENCY:
        return Decimal("1")
    rate = rates.get(code)
    if rate is None:
        if strict:
            raise MissingRateError(code)
        logger.warning("No exchange rate for %s, using face value", code)
        return Decimal("1")
    return Decimal(rate)


def convert_to_base(
    amount: Decimal,
    currency_code: str,
    rates: Mapping[str, Decimal],
    *,
    strict: bool = False,
) -> Decimal:
    """Convert an amount in currency_code to the base currency."""
    return Decimal(amount) * rate_for(currency_code, rates, strict=strict)


class ExchangeRateService:
    """Service for managing the exchange rate table."""

    def __init__(self, db: Database, strict: bool = False):
        """Initialize exchange rate service.

        Args:
            db: Database instance
            strict: If True, conversions with an unknown currency raise
                MissingRateError instead of passing through at face value
        """
        self.db = db
        self.strict = strict

    def set_rate(
        self, currency_code: str, rate_to_base: Decimal, currency_name: Optional[str] = None
    ) -> ExchangeRate:
        """Create or update the rate for a currency.

        Raises:
            ValidationError: If the rate is not positive or tries to change
                the base currency rate
        """
        code = normalize_currency(currency_code)
        if not code:
            raise ValidationError("Currency code is required")
        rate = Decimal(rate_to_base)
        if rate <= 0:
            raise ValidationError(f"Exchange rate for {code} must be positive")
        if code == BASE_CURRENCY and rate != 1:
            raise ValidationError(f"Rate for base currency {BASE_CURRENCY} is fixed at 1")

        self.db.upsert_exchange_rate(code, rate, currency_name)
        logger.info("Exchange rate %s set to %s", code, rate)
        stored = self.db.get_exchange_rate(code)
        if stored is None:
            raise NotFoundError(f"Exchange rate for {code} not found")
        return stored

    def list_rates(self) -> list[ExchangeRate]:
        """List stored exchange rates ordered by currency code."""
        return self.db.list_exchange_rates()

    def get_rates(self) -> dict[str, Decimal]:
        """Return the rate table as {currency_code: rate_to_base}."""
        rates = {rate.currency_code: rate.rate_to_base for rate in self.db.list_exchange_rates()}
        rates[BASE_CURRENCY] = Decimal("1")
        return rates

    def rate_for(self, currency_code: str) -> Decimal:
        """Look up a single rate using the configured strictness."""
        return rate_for(currency_code, self.get_rates(), strict=self.strict)

    def convert(self, amount: Decimal, currency_code: str) -> Decimal:
        """Convert amount to the base currency using stored rates."""
        return convert_to_base(amount, currency_code, self.get_rates(), strict=self.strict)
