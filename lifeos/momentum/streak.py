"""
Streak computation.

A streak is the number of consecutive calendar days on which the user
completed at least one task. Credit is granted at most once per day and
any gap of two or more days resets progress to 1.

All comparisons happen at day resolution: datetimes are truncated to
their date before any arithmetic, so the time of day never matters.
"""

from datetime import date, datetime, timedelta


ONE_DAY = timedelta(days=1)


def to_day(value: date | datetime) -> date:
    """Truncate a datetime to its calendar date (dates pass through)."""
    if isinstance(value, datetime):
        return value.date()
    return value


def compute_streak(
    current_streak: int,
    last_active_date: date | datetime | None,
    today: date | datetime,
) -> tuple[int, date]:
    """
    Compute the streak after a task completion on ``today``.

    Args:
        current_streak: Streak before this completion (>= 0)
        last_active_date: Day of the previous completion, or None if never
        today: Current day

    Returns:
        (new_streak, new_last_active_date) - the date is always ``today``
    """
    today = to_day(today)

    if last_active_date is None:
        return 1, today

    last_active = to_day(last_active_date)

    if last_active == today:
        # Already credited today
        return current_streak, today

    if today - last_active == ONE_DAY:
        return current_streak + 1, today

    # Gap of two or more days, or a last-active date in the future (clock skew)
    return 1, today


__all__ = ["ONE_DAY", "compute_streak", "to_day"]
