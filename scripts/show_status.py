#!/usr/bin/env python3
import argparse
import sys

import requests

from vaxtracker.ingest import CsvFormatError, parse_csv
from vaxtracker.models import VaccinationDataset
from vaxtracker.settings import settings
from vaxtracker.tracker import VaccinationTracker


def fetch_text(url: str) -> str:
    r = requests.get(url, timeout=settings.http_timeout, headers={"User-Agent": "vaxtracker/0.1"})
    r.raise_for_status()
    return r.content.decode("utf-8", errors="replace")


def main():
    ap = argparse.ArgumentParser(description="Print the vaccination status lines for one location.")
    ap.add_argument("location", nargs="?", default=settings.default_location)
    ap.add_argument("--list", action="store_true", help="list known locations and exit")
    ap.add_argument("--url", default=settings.owid_vaccinations_csv_url)
    args = ap.parse_args()

    try:
        text = fetch_text(args.url)
    except requests.RequestException as e:
        print(f"ERROR: download failed: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        records = parse_csv(text)
    except CsvFormatError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(2)

    dataset = VaccinationDataset(args.location)
    dataset.replace_all(records)

    if args.list:
        for loc in sorted(dataset.locations()):
            print(loc)
        return

    tracker = VaccinationTracker(dataset, url=args.url)
    for line in tracker.recompute().lines():
        print(line)


if __name__ == "__main__":
    main()
