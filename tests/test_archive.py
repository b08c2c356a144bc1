import zipfile

import pytest

from citybench.errors import ExtractError
from citybench.etl.extract.archive import extract_archive
from conftest import city_rows, write_csv, write_zip


def test_extracts_member_paths(tmp_path):
    src = write_csv(tmp_path / "src" / "cities.txt", city_rows(3))
    archive = write_zip(tmp_path / "data" / "cities.txt.zip", "data/cities.txt", src)
    dest = tmp_path / "out"

    paths = extract_archive(archive, dest)

    assert paths == [dest / "data" / "cities.txt"]
    assert paths[0].read_bytes() == src.read_bytes()


def test_overwrites_existing_file(tmp_path):
    src = write_csv(tmp_path / "src" / "cities.txt", city_rows(1))
    archive = write_zip(tmp_path / "cities.txt.zip", "data/cities.txt", src)
    stale = tmp_path / "out" / "data" / "cities.txt"
    stale.parent.mkdir(parents=True)
    stale.write_text("stale")

    extract_archive(archive, tmp_path / "out")

    assert stale.read_bytes() == src.read_bytes()


def test_missing_archive_names_expected_path(tmp_path):
    missing = tmp_path / "data" / "cities.txt.zip"
    with pytest.raises(ExtractError, match="expected location") as exc:
        extract_archive(missing, tmp_path)
    assert str(missing) in str(exc.value)


def test_not_a_zip(tmp_path):
    bogus = tmp_path / "cities.txt.zip"
    bogus.write_text("definitely not a zip")
    with pytest.raises(ExtractError, match="can't extract"):
        extract_archive(bogus, tmp_path)


def test_directories_are_not_listed(tmp_path):
    archive = tmp_path / "nested.zip"
    with zipfile.ZipFile(archive, "w") as zf:
        zf.writestr("data/", "")
        zf.writestr("data/cities.txt", "Country,City\n")
    assert extract_archive(archive, tmp_path / "out") == [tmp_path / "out" / "data" / "cities.txt"]
