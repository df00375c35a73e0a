from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="VAXTRACKER_")

    # Our World in Data: vaccinations per location and day
    owid_vaccinations_csv_url: str = (
        "https://raw.githubusercontent.com/owid/"
        "covid-19-data/master/public/data/vaccinations/"
        "vaccinations.csv"
    )

    default_location: str = "World"

    refresh_interval_seconds: float = 3600.0  # reload from source
    estimate_interval_seconds: float = 300.0  # recompute real-time estimate

    http_timeout: float = 60.0

    # None = system local time, like the dataset dates are read on a desktop
    timezone: str | None = None

    log_level: str = "INFO"

settings = Settings()
