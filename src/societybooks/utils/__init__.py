"""Utility functions for societybooks."""

from societybooks.utils.date_parser import parse_date
from societybooks.utils.amount_parser import parse_amount
from societybooks.utils.society_resolver import resolve_society

__all__ = ["parse_date", "parse_amount", "resolve_society"]
