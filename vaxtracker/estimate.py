import datetime as dt
import math

from vaxtracker.models import VaccinationRecord

MINUTES_PER_DAY = 1440.0
PER_MILLION_TO_PER_HUNDRED = 10000.0


class DateParseError(ValueError):
    """Record date is not a yyyy-MM-dd calendar date."""


def known_good_instant(date_str: str, tzinfo=None) -> dt.datetime:
    # A snapshot dated D holds data through the end of D
    try:
        day = dt.datetime.strptime(date_str, "%Y-%m-%d")
    except (TypeError, ValueError) as e:
        raise DateParseError(f"invalid record date {date_str!r}") from e
    midnight = day.replace(tzinfo=tzinfo)
    if tzinfo is not None:
        # 24 real hours, not 24 wall-clock hours across a DST change
        midnight = midnight.astimezone(dt.timezone.utc)
    return midnight + dt.timedelta(hours=24)


def minutes_since_update(date_str: str, now: dt.datetime) -> int:
    """Whole minutes between the end of `date_str` and `now`; negative if `now` is earlier."""
    known = known_good_instant(date_str, now.tzinfo)
    if now.tzinfo is not None:
        now = now.astimezone(dt.timezone.utc)
    elapsed = now - known
    return math.floor(elapsed.total_seconds() / 60)


def percent_rate_per_minute(daily_per_million: int) -> float:
    return (daily_per_million / MINUTES_PER_DAY) / PER_MILLION_TO_PER_HUNDRED


def doses_rate_per_minute(daily: int) -> float:
    return daily / MINUTES_PER_DAY


def estimated_people_vaccinated_per_hundred(record: VaccinationRecord, now: dt.datetime):
    known = record.people_vaccinated_per_hundred
    rate = record.daily_vaccinations_per_million
    if known is None or rate is None:
        return None
    minutes = minutes_since_update(record.date, now)
    return known + minutes * percent_rate_per_minute(rate)


def estimated_people_vaccinated(record: VaccinationRecord, now: dt.datetime):
    known = record.people_vaccinated
    rate = record.daily_vaccinations
    if known is None or rate is None:
        return None
    minutes = minutes_since_update(record.date, now)
    return known + int(minutes * doses_rate_per_minute(rate))


def as_percentage(value) -> str:
    if value is None:
        return "--%"
    return f"{value:.2f}%"


def format_count(value) -> str:
    if value is None:
        return "Unknown"
    return f"{value:,}"
