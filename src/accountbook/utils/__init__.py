"""Utility functions for accountbook."""

from accountbook.utils.date_parser import parse_date
from accountbook.utils.amount_parser import parse_amount, parse_money
from accountbook.utils.account_resolver import resolve_bank_account, resolve_chart_account

__all__ = ["parse_date", "parse_amount", "parse_money", "resolve_bank_account", "resolve_chart_account"]
