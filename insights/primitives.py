"""Date-window and aggregation helpers shared by every analyzer."""

import math
from datetime import date, timedelta
from typing import Tuple

import pandas as pd


def as_timestamp(day) -> pd.Timestamp:
    """Normalize a date/datetime/string to a midnight Timestamp."""
    return pd.Timestamp(day).normalize()


def days_between(start, end) -> pd.Series | int:
    """
    Whole days from start to end (negative when end is earlier).

    Either argument may be a scalar or a datetime Series; the result has the
    same shape as the input.
    """
    if isinstance(start, pd.Series) or isinstance(end, pd.Series):
        start = start.dt.normalize() if isinstance(start, pd.Series) else as_timestamp(start)
        end = end.dt.normalize() if isinstance(end, pd.Series) else as_timestamp(end)
        return (end - start).dt.days
    return (as_timestamp(end) - as_timestamp(start)).days


def add_months(anchor: date, months: int) -> date:
    """Shift a date by whole months, clamping the day to the month's end."""
    return (pd.Timestamp(anchor) + pd.DateOffset(months=months)).date()


def month_bounds(anchor: date, offset: int = 0) -> Tuple[pd.Timestamp, pd.Timestamp]:
    """First and last day of the calendar month `offset` months after anchor."""
    shifted = pd.Timestamp(add_months(anchor, offset))
    start = shifted.replace(day=1)
    end = start + pd.offsets.MonthEnd(0)
    return start, end


def month_label(anchor: date, offset: int = 0) -> str:
    """Display label such as 'November 2026'."""
    return pd.Timestamp(add_months(anchor, offset)).strftime("%B %Y")


def month_key(dates: pd.Series) -> pd.Series:
    """Bucket datetimes by calendar month ('2026-10')."""
    return dates.dt.strftime("%Y-%m")


def window_start(today: date, days: int) -> date:
    return today - timedelta(days=days)


def group_by_member(df: pd.DataFrame, column: str = "member_id") -> pd.Series:
    """Record count per member."""
    if df.empty:
        return pd.Series(dtype=int)
    return df.groupby(column).size()


def last_date_by_member(df: pd.DataFrame, date_column: str = "date") -> pd.Series:
    """Most recent date per member."""
    if df.empty:
        return pd.Series(dtype="datetime64[ns]")
    return df.groupby("member_id")[date_column].max()


def round_half_up(value: float) -> int:
    """Round halves upward (2.5 -> 3), unlike the built-in banker's round."""
    return int(math.floor(value + 0.5))
