import datetime as dt
import logging
import math

import httpx
from dateutil import tz

from vaxtracker.models import VaccinationRecord
from vaxtracker.settings import settings

log = logging.getLogger(__name__)

# Columns we read; the feed carries more (total_vaccinations, daily_vaccinations_raw, ...)
REQUIRED_COLUMNS = (
    "location",
    "iso_code",
    "date",
    "people_vaccinated",
    "people_fully_vaccinated",
    "people_vaccinated_per_hundred",
    "people_fully_vaccinated_per_hundred",
    "daily_vaccinations",
    "daily_vaccinations_per_million",
)


class CsvFormatError(ValueError):
    """The feed header no longer has a column we depend on."""


def local_tz():
    return tz.gettz(settings.timezone)


def now_iso():
    return dt.datetime.now(tz=local_tz()).replace(microsecond=0).isoformat()


def _is_bare_number(s: str) -> bool:
    # int() and float() also take surrounding blanks and digit underscores
    return s == s.strip() and "_" not in s


def to_int(s: str):
    if not _is_bare_number(s):
        return None
    try:
        return int(s)
    except ValueError:
        return None


def to_float(s: str):
    if not _is_bare_number(s):
        return None
    try:
        x = float(s)
    except ValueError:
        return None
    return x if math.isfinite(x) else None


def _column_index(header: list[str], header_names) -> dict[str, int]:
    missing = [name for name in header_names if name not in header]
    if missing:
        raise CsvFormatError(f"CSV header is missing columns: {', '.join(missing)}")
    return {name: header.index(name) for name in header_names}


def _split_csv(text: str, header_names):
    # No quoting support: the OWID feed never has commas inside a field
    lines = text.split("\n")
    header = lines[0].split(",")
    idx = _column_index(header, header_names)
    for ln in lines[1:]:
        cols = ln.split(",")
        if len(cols) < len(header):
            continue
        yield {name: cols[i] for name, i in idx.items()}


def parse_csv(text: str, header_names=REQUIRED_COLUMNS) -> list[VaccinationRecord]:
    """
    Turn the raw vaccinations CSV into records.

    Lines with fewer fields than the header are dropped, unparseable numeric
    cells become None. A header without one of `header_names` raises
    CsvFormatError instead of yielding an empty dataset.
    """
    records = []
    for r in _split_csv(text, header_names):
        records.append(VaccinationRecord(
            location=r["location"],
            iso_code=r["iso_code"],
            date=r["date"],
            people_vaccinated=to_int(r["people_vaccinated"]),
            people_fully_vaccinated=to_int(r["people_fully_vaccinated"]),
            people_vaccinated_per_hundred=to_float(r["people_vaccinated_per_hundred"]),
            people_fully_vaccinated_per_hundred=to_float(r["people_fully_vaccinated_per_hundred"]),
            daily_vaccinations=to_int(r["daily_vaccinations"]),
            daily_vaccinations_per_million=to_int(r["daily_vaccinations_per_million"]),
        ))
    return records


async def download_bytes(url: str) -> bytes:
    async with httpx.AsyncClient(timeout=settings.http_timeout) as client:
        r = await client.get(url)
        r.raise_for_status()
        return r.content
