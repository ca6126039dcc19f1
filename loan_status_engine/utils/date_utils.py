"""Date manipulation utilities"""

import math
from datetime import date, datetime, timedelta

# Day zero of the spreadsheet serial date system (serial 25569 is 1970-01-01)
EXCEL_EPOCH = datetime(1899, 12, 30)


def local_today() -> date:
    """Calculation date: local calendar day, time of day dropped"""
    return date.today()


def excel_serial_to_date(serial: float) -> date:
    """Convert a spreadsheet serial number to a calendar date (fraction of day ignored)"""
    return (EXCEL_EPOCH + timedelta(days=serial)).date()


def days_between(start: date, end: date) -> int:
    """Whole days from start to end (negative if end is earlier)"""
    return (end - start).days


def approximate_months_between(start: date, end: date) -> int:
    """Month count using 30-day months, rounded to the nearest month"""
    return math.floor(days_between(start, end) / 30 + 0.5)
