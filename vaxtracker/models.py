from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Iterable, Optional


@dataclass(frozen=True)
class VaccinationRecord:
    location: str
    iso_code: str
    date: str  # yyyy-MM-dd, sorts chronologically as a string
    people_vaccinated: Optional[int] = None  # received at least one dose
    people_fully_vaccinated: Optional[int] = None  # received all necessary doses
    people_vaccinated_per_hundred: Optional[float] = None
    people_fully_vaccinated_per_hundred: Optional[float] = None
    daily_vaccinations: Optional[int] = None  # smoothed doses per day
    daily_vaccinations_per_million: Optional[int] = None

    @classmethod
    def empty(cls) -> "VaccinationRecord":
        return cls(location="Unknown", iso_code="???", date="Never")

    def as_dict(self) -> dict:
        return {
            "location": self.location,
            "iso_code": self.iso_code,
            "date": self.date,
            "people_vaccinated": self.people_vaccinated,
            "people_fully_vaccinated": self.people_fully_vaccinated,
            "people_vaccinated_per_hundred": self.people_vaccinated_per_hundred,
            "people_fully_vaccinated_per_hundred": self.people_fully_vaccinated_per_hundred,
            "daily_vaccinations": self.daily_vaccinations,
            "daily_vaccinations_per_million": self.daily_vaccinations_per_million,
        }


class VaccinationDataset:
    """
    Records of the last successful fetch plus the selected location.

    The record list is swapped as a whole, never mutated in place, so a reader
    holding a reference always sees one complete fetch.
    """

    def __init__(self, location: str = "World") -> None:
        self._lock = threading.Lock()
        self._records: tuple[VaccinationRecord, ...] = ()
        self._location = location

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    @property
    def location(self) -> str:
        with self._lock:
            return self._location

    def records(self) -> tuple[VaccinationRecord, ...]:
        with self._lock:
            return self._records

    def replace_all(self, records: Iterable[VaccinationRecord]) -> None:
        new_records = tuple(records)
        with self._lock:
            self._records = new_records

    def set_location(self, name: str) -> None:
        with self._lock:
            self._location = name

    def locations(self) -> set[str]:
        return {r.location for r in self.records()}

    def latest(self, location: Optional[str] = None) -> VaccinationRecord:
        with self._lock:
            records = self._records
            if location is None:
                location = self._location

        matching = [r for r in records if r.location == location]
        if not matching:
            return VaccinationRecord.empty()
        return max(matching, key=lambda r: r.date)
