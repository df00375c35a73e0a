import datetime as dt
import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi import FastAPI, Query

from vaxtracker.ingest import local_tz
from vaxtracker.settings import settings
from vaxtracker.tracker import VaccinationTracker

logging.basicConfig(level=settings.log_level, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
log = logging.getLogger(__name__)


def create_app(tracker: VaccinationTracker | None = None) -> FastAPI:
    app = FastAPI(title="Vaccine Rollout Tracker", version="0.1.0")
    app.state.tracker = tracker or VaccinationTracker()
    scheduler = AsyncIOScheduler()

    @app.on_event("startup")
    async def startup():
        t: VaccinationTracker = app.state.tracker

        # first load runs as a job right away; requests are served meanwhile
        # with placeholders. A CsvFormatError is logged by the scheduler.
        scheduler.add_job(t.refresh, "interval", seconds=settings.refresh_interval_seconds,
                          id="refresh", max_instances=1, coalesce=True,
                          next_run_time=dt.datetime.now(tz=local_tz()), misfire_grace_time=None)
        scheduler.add_job(t.recompute, "interval", seconds=settings.estimate_interval_seconds,
                          id="recompute", coalesce=True)
        scheduler.start()
        log.info("Refreshing every %ss, re-estimating every %ss",
                 settings.refresh_interval_seconds, settings.estimate_interval_seconds)

    @app.on_event("shutdown")
    async def shutdown():
        if scheduler.running:
            scheduler.shutdown(wait=False)

    @app.get("/health")
    def health():
        t: VaccinationTracker = app.state.tracker
        return {"ok": True, "records": len(t.dataset), "last_refresh": t.last_refresh}

    @app.get("/locations")
    def locations():
        return sorted(app.state.tracker.locations())

    @app.get("/latest")
    def latest():
        return app.state.tracker.latest().as_dict()

    @app.get("/status")
    def status():
        return app.state.tracker.snapshot.as_dict()

    @app.put("/location")
    def change_location(name: str = Query(..., description="e.g. World, Germany, United Kingdom")):
        t: VaccinationTracker = app.state.tracker
        t.change_location(name)
        return t.recompute().as_dict()

    return app


app = create_app()
