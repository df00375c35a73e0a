import pytest


HEADER = (
    "location,iso_code,date,total_vaccinations,people_vaccinated,people_fully_vaccinated,"
    "daily_vaccinations_raw,daily_vaccinations,total_vaccinations_per_hundred,"
    "people_vaccinated_per_hundred,people_fully_vaccinated_per_hundred,daily_vaccinations_per_million"
)

SAMPLE_CSV = "\n".join([
    HEADER,
    "World,OWID_WRL,2021-03-01,250000000,180000000,70000000,,6000000,3.21,2.31,0.9,770",
    "World,OWID_WRL,2021-03-02,256000000,184000000,72000000,,6100000,3.28,2.36,0.92,782",
    "Germany,DEU,2021-03-02,7000000,4800000,2200000,190000,170000,8.35,5.73,2.63,2029",
    "Germany,DEU,2021-03-01,6800000,4700000,2100000,,165000,8.11,5.61,2.51,1969",
    "Wales,,2021-03-02,,,,,,,,,",
    "",
])


@pytest.fixture
def sample_csv():
    return SAMPLE_CSV
