from __future__ import annotations

import asyncio
import datetime as dt
import logging
from dataclasses import dataclass, asdict
from typing import Awaitable, Callable, Optional

import httpx

from vaxtracker import estimate
from vaxtracker.estimate import DateParseError, as_percentage, format_count
from vaxtracker.ingest import download_bytes, local_tz, now_iso, parse_csv
from vaxtracker.models import VaccinationDataset, VaccinationRecord
from vaxtracker.settings import settings

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatusSnapshot:
    """What the menu shows: one line per field, placeholders for unknowns."""
    location: str
    last_updated: str
    percentage_vaccinated: str
    estimated_percentage_vaccinated: str
    people_vaccinated: str
    estimated_people_vaccinated: str
    computed_at: str

    def lines(self) -> list[str]:
        return [
            f"Percentage vaccinated (last update): {self.percentage_vaccinated}",
            f"Estimated percentage vaccinated (real-time): {self.estimated_percentage_vaccinated}",
            f"People vaccinated (last update): {self.people_vaccinated}",
            f"Estimated people vaccinated (real-time): {self.estimated_people_vaccinated}",
            f"Last updated: {self.last_updated}",
            f"Country: {self.location}",
        ]

    def as_dict(self) -> dict:
        d = asdict(self)
        d["lines"] = self.lines()
        return d


class VaccinationTracker:
    def __init__(
        self,
        dataset: Optional[VaccinationDataset] = None,
        *,
        url: Optional[str] = None,
        fetch: Callable[[str], Awaitable[bytes]] = download_bytes,
        clock: Optional[Callable[[], dt.datetime]] = None,
    ):
        if dataset is None:
            dataset = VaccinationDataset(settings.default_location)
        self.dataset = dataset
        self.url = url or settings.owid_vaccinations_csv_url
        self._fetch = fetch
        self._clock = clock or (lambda: dt.datetime.now(tz=local_tz()))
        self.last_refresh: Optional[str] = None
        self.snapshot: StatusSnapshot = self._build_snapshot()

    # --- entry points for the scheduler

    async def refresh(self) -> bool:
        """
        Fetch and parse the feed, then swap the dataset.
        Transport errors keep the old data and return False; a changed header
        raises CsvFormatError.
        """
        try:
            raw = await self._fetch(self.url)
        except httpx.HTTPError as e:
            log.warning("Fetching %s failed, keeping %d records: %s", self.url, len(self.dataset), e)
            return False

        # ~100k lines, parse off the event loop
        records = await asyncio.to_thread(parse_csv, raw.decode("utf-8", errors="replace"))
        self.dataset.replace_all(records)
        self.last_refresh = now_iso()
        log.info("Loaded %d records for %d locations", len(records), len(self.dataset.locations()))
        self.recompute()
        return True

    def recompute(self) -> StatusSnapshot:
        self.snapshot = self._build_snapshot()
        return self.snapshot

    # --- read side

    def latest(self) -> VaccinationRecord:
        return self.dataset.latest()

    def locations(self) -> set[str]:
        return self.dataset.locations()

    def change_location(self, name: str) -> None:
        self.dataset.set_location(name)

    def estimated_people_vaccinated_per_hundred(self, record: Optional[VaccinationRecord] = None):
        record = record or self.latest()
        try:
            return estimate.estimated_people_vaccinated_per_hundred(record, self._clock())
        except DateParseError as e:
            log.warning("No percentage estimate for %s: %s", record.location, e)
            return None

    def estimated_people_vaccinated(self, record: Optional[VaccinationRecord] = None):
        record = record or self.latest()
        try:
            return estimate.estimated_people_vaccinated(record, self._clock())
        except DateParseError as e:
            log.warning("No people estimate for %s: %s", record.location, e)
            return None

    def percentage_vaccinated(self, estimate: bool) -> str:
        if estimate:
            return as_percentage(self.estimated_people_vaccinated_per_hundred())
        return as_percentage(self.latest().people_vaccinated_per_hundred)

    def _build_snapshot(self) -> StatusSnapshot:
        # one lookup so every line describes the same record
        latest = self.latest()
        return StatusSnapshot(
            location=latest.location,
            last_updated=latest.date,
            percentage_vaccinated=as_percentage(latest.people_vaccinated_per_hundred),
            estimated_percentage_vaccinated=as_percentage(
                self.estimated_people_vaccinated_per_hundred(latest)),
            people_vaccinated=format_count(latest.people_vaccinated),
            estimated_people_vaccinated=format_count(
                self.estimated_people_vaccinated(latest)),
            computed_at=now_iso(),
        )
