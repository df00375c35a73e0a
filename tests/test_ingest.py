import pytest

from vaxtracker.ingest import REQUIRED_COLUMNS, CsvFormatError, parse_csv


def test_parses_typed_records(sample_csv):
    records = parse_csv(sample_csv)
    assert len(records) == 5

    world = records[0]
    assert world.location == "World"
    assert world.iso_code == "OWID_WRL"
    assert world.date == "2021-03-01"
    assert world.people_vaccinated == 180000000
    assert world.people_fully_vaccinated == 70000000
    assert world.people_vaccinated_per_hundred == pytest.approx(2.31)
    assert world.people_fully_vaccinated_per_hundred == pytest.approx(0.9)
    assert world.daily_vaccinations == 6000000
    assert world.daily_vaccinations_per_million == 770


def test_preserves_line_order(sample_csv):
    records = parse_csv(sample_csv)
    assert [(r.location, r.date) for r in records] == [
        ("World", "2021-03-01"),
        ("World", "2021-03-02"),
        ("Germany", "2021-03-02"),
        ("Germany", "2021-03-01"),
        ("Wales", "2021-03-02"),
    ]


def test_blank_cells_are_absent_and_strings_verbatim(sample_csv):
    wales = parse_csv(sample_csv)[-1]
    assert wales.iso_code == ""
    assert wales.people_vaccinated is None
    assert wales.people_vaccinated_per_hundred is None
    assert wales.daily_vaccinations is None
    assert wales.daily_vaccinations_per_million is None


def test_non_numeric_cells_are_absent():
    text = "\n".join([
        ",".join(REQUIRED_COLUMNS),
        "Chile,CHL,2021-03-01,abc,1.5,nan,12.0,inf,x",
    ])
    (rec,) = parse_csv(text)
    assert rec.people_vaccinated is None
    # "1.5" is not an integer count
    assert rec.people_fully_vaccinated is None
    assert rec.people_vaccinated_per_hundred is None
    assert rec.people_fully_vaccinated_per_hundred == 12.0
    assert rec.daily_vaccinations is None
    assert rec.daily_vaccinations_per_million is None


def test_short_rows_are_dropped():
    header = ",".join(REQUIRED_COLUMNS)
    text = "\n".join([
        header,
        "Chile,CHL,2021-03-01,1,2,3.0,4.0,5,6",
        "Chile,CHL,2021-03-02,1,2,3.0,4.0,5",
        "garbage",
        "",
    ])
    records = parse_csv(text)
    assert [r.date for r in records] == ["2021-03-01"]


def test_extra_fields_are_ignored():
    text = "\n".join([
        ",".join(REQUIRED_COLUMNS),
        "Chile,CHL,2021-03-01,1,2,3.0,4.0,5,6,extra,more",
    ])
    (rec,) = parse_csv(text)
    assert rec.daily_vaccinations_per_million == 6


def test_columns_are_found_by_name():
    cols = list(reversed(REQUIRED_COLUMNS))
    values = {
        "location": "Peru", "iso_code": "PER", "date": "2021-04-01",
        "people_vaccinated": "10", "people_fully_vaccinated": "5",
        "people_vaccinated_per_hundred": "0.5", "people_fully_vaccinated_per_hundred": "0.25",
        "daily_vaccinations": "3", "daily_vaccinations_per_million": "7",
    }
    text = ",".join(cols) + "\n" + ",".join(values[c] for c in cols)
    (rec,) = parse_csv(text)
    assert rec.location == "Peru"
    assert rec.people_vaccinated == 10
    assert rec.daily_vaccinations_per_million == 7


@pytest.mark.parametrize("missing", ["location", "date", "daily_vaccinations_per_million"])
def test_missing_header_column_raises(missing):
    header = ",".join(c for c in REQUIRED_COLUMNS if c != missing)
    text = header + "\nChile,CHL,2021-03-01,1,2,3.0,4.0,5,6"
    with pytest.raises(CsvFormatError, match=missing):
        parse_csv(text)


def test_empty_text_is_a_format_error():
    with pytest.raises(CsvFormatError):
        parse_csv("")


def test_header_only_gives_no_records():
    assert parse_csv(",".join(REQUIRED_COLUMNS)) == []


@pytest.mark.parametrize("cell", [" 12", "12 ", "1_000", "\t5"])
def test_padded_or_underscored_numbers_are_absent(cell):
    text = "\n".join([
        ",".join(REQUIRED_COLUMNS),
        f"Chile,CHL,2021-03-01,{cell},{cell},{cell},{cell},{cell},{cell}",
    ])
    (rec,) = parse_csv(text)
    assert rec.people_vaccinated is None
    assert rec.people_vaccinated_per_hundred is None
    assert rec.daily_vaccinations_per_million is None
