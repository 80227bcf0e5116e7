import pytest

from da_register_extraction.reference import ReferenceData, ReferenceDataError, load_reference_data


def _write_tables(directory, suffixes=True, hundreds=True) -> None:
    (directory / "streetnames.txt").write_text(
        "Main Road,Kadina\r\nMAIN ROAD,WALLAROO\r\n\r\nRailway Tce South, Paskeville\r\n", encoding="utf-8"
    )
    (directory / "suburbnames.txt").write_text("KADINA TOWN,KADINA\nPASKEVILLE,PASKEVILLE\n", encoding="utf-8")
    if suffixes:
        (directory / "streetsuffixes.txt").write_text("TCE,TERRACE\nRD,ROAD\n", encoding="utf-8")
    if hundreds:
        (directory / "hundrednames.txt").write_text("Kulpara\nWallaroo\n\n", encoding="utf-8")


def test_load_reference_data(tmp_path) -> None:
    _write_tables(tmp_path)
    reference = load_reference_data(tmp_path)

    assert reference.street_names["MAIN ROAD"] == ("KADINA", "WALLAROO")
    assert reference.street_names["RAILWAY TCE SOUTH"] == ("PASKEVILLE",)
    assert reference.suburb_names["KADINA TOWN"] == "KADINA"
    assert reference.street_suffixes["TCE"] == "TERRACE"
    assert reference.hundred_names == frozenset({"KULPARA", "WALLAROO"})


def test_reference_data_is_read_only(tmp_path) -> None:
    _write_tables(tmp_path)
    reference = load_reference_data(tmp_path)
    with pytest.raises(TypeError):
        reference.street_suffixes["ST"] = "STREET"  # type: ignore[index]


def test_optional_tables_may_be_missing(tmp_path, caplog) -> None:
    _write_tables(tmp_path, suffixes=False, hundreds=False)
    reference = load_reference_data(tmp_path)
    assert dict(reference.street_suffixes) == {}
    assert reference.hundred_names == frozenset()
    assert "streetsuffixes.txt" in caplog.text


def test_required_table_missing(tmp_path) -> None:
    (tmp_path / "suburbnames.txt").write_text("KADINA,KADINA\n", encoding="utf-8")
    with pytest.raises(FileNotFoundError):
        load_reference_data(tmp_path)


def test_malformed_pair_reports_line(tmp_path) -> None:
    _write_tables(tmp_path)
    (tmp_path / "suburbnames.txt").write_text("KADINA,KADINA\nWALLAROO\n", encoding="utf-8")
    with pytest.raises(ReferenceDataError, match="suburbnames.txt:2"):
        load_reference_data(tmp_path)


def test_build_normalises_case() -> None:
    reference = ReferenceData.build(street_names={" main road ": ["kadina"]}, hundred_names=["kulpara "])
    assert reference.street_names == {"MAIN ROAD": ("KADINA",)}
    assert "KULPARA" in reference.hundred_names
