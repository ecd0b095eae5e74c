"""SQLAlchemy models for accountbook database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()

MONEY = Numeric(18, 2)
RATE = Numeric(18, 6)


class ChartAccount(Base):
    """Chart of accounts model with hierarchical structure."""

    __tablename__ = "chart_accounts"

    id = Column(Integer, primary_key=True)
    code = Column(String, unique=True, nullable=False)
    name = Column(String, nullable=False)
    account_type = Column(String, nullable=False)
    normal_balance = Column(String, nullable=False)
    subtype = Column(String, nullable=True)
    parent_id = Column(Integer, ForeignKey("chart_accounts.id"), nullable=True)
    currency = Column(String, default="TZS", nullable=False)
    description = Column(String, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    parent = relationship("ChartAccount", remote_side=[id], backref="children")
    journal_lines = relationship("JournalLine", back_populates="account")


class JournalEntry(Base):
    """Journal entry header model."""

    __tablename__ = "journal_entries"

    id = Column(Integer, primary_key=True)
    entry_number = Column(String, unique=True, nullable=False)
    entry_date = Column(Date, nullable=False)
    description = Column(String, nullable=False)
    status = Column(String, default="draft", nullable=False)
    reference_type = Column(String, nullable=True)
    reference_id = Column(String, nullable=True)
    posted_at = Column(DateTime, nullable=True)
    voided_at = Column(DateTime, nullable=True)
    rejection_reason = Column(String, nullable=True)
    notes = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    lines = relationship(
        "JournalLine",
        back_populates="entry",
        cascade="all, delete-orphan",
        order_by="JournalLine.id",
    )


class JournalLine(Base):
    """Journal line model: one debit or credit of an entry."""

    __tablename__ = "journal_lines"

    id = Column(Integer, primary_key=True)
    journal_entry_id = Column(Integer, ForeignKey("journal_entries.id"), nullable=False)
    account_id = Column(Integer, ForeignKey("chart_accounts.id"), nullable=False)
    description = Column(String, nullable=True)
    debit_amount = Column(MONEY, default=0, nullable=False)
    credit_amount = Column(MONEY, default=0, nullable=False)
    currency = Column(String, default="TZS", nullable=False)
    exchange_rate = Column(RATE, default=1, nullable=False)
    amount_in_base = Column(MONEY, nullable=False)

    # Relationships
    entry = relationship("JournalEntry", back_populates="lines")
    account = relationship("ChartAccount", back_populates="journal_lines")


class DocumentCounter(Base):
    """Per-key sequence used for entry numbers."""

    __tablename__ = "document_counters"

    id = Column(Integer, primary_key=True)
    counter_key = Column(String, unique=True, nullable=False)
    counter_value = Column(Integer, default=0, nullable=False)


class ExchangeRate(Base):
    """Exchange rate to the base currency."""

    __tablename__ = "exchange_rates"

    id = Column(Integer, primary_key=True)
    currency_code = Column(String, unique=True, nullable=False)
    currency_name = Column(String, nullable=True)
    rate_to_base = Column(RATE, nullable=False)
    updated_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=True)


class BankAccount(Base):
    """Bank account model."""

    __tablename__ = "bank_accounts"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    bank_name = Column(String, nullable=False)
    account_number = Column(String, nullable=True)
    currency = Column(String, default="TZS", nullable=False)
    chart_account_id = Column(Integer, ForeignKey("chart_accounts.id"), nullable=True)
    opening_balance = Column(MONEY, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    transactions = relationship("BankTransaction", back_populates="bank_account")


class BankTransaction(Base):
    """Bank statement line model."""

    __tablename__ = "bank_transactions"

    id = Column(Integer, primary_key=True)
    bank_account_id = Column(Integer, ForeignKey("bank_accounts.id"), nullable=False)
    transaction_date = Column(Date, nullable=False)
    description = Column(String, nullable=True)
    reference = Column(String, nullable=True)
    debit_amount = Column(MONEY, default=0, nullable=False)
    credit_amount = Column(MONEY, default=0, nullable=False)
    is_reconciled = Column(Boolean, default=False, nullable=False)
    reconciled_at = Column(DateTime, nullable=True)
    # One bank transaction per journal entry
    journal_entry_id = Column(Integer, ForeignKey("journal_entries.id"), unique=True, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    bank_account = relationship("BankAccount", back_populates="transactions")


class OpenItem(Base):
    """Outstanding receivable or payable used for aging."""

    __tablename__ = "open_items"

    id = Column(Integer, primary_key=True)
    kind = Column(String, nullable=False)
    reference = Column(String, nullable=False)
    party_name = Column(String, nullable=True)
    document_date = Column(Date, nullable=False)
    due_date = Column(Date, nullable=True)
    amount = Column(MONEY, nullable=False)
    currency = Column(String, default="TZS", nullable=False)
    is_settled = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
