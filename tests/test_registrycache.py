"""Tests for registrycache.py: JSON snapshots."""

import datetime
import json

import pytest

from registrycache import (
    SnapshotError,
    dumps_snapshot,
    load_snapshot,
    loads_snapshot,
    save_snapshot,
)
from subtagrecord import SubtagRecordType
from tagindex import TagIndex


class TestDumps:
    def test_structure(self, index, parsed):
        data = json.loads(dumps_snapshot(index.unique_records(), parsed.file_date))
        assert data["file-date"] == "2024-03-07"
        assert len(data["languages"]) == 23
        assert data["languages"][0] == {
            "type": "language",
            "subtag": "en",
            "description": ["English"],
            "added": "2005-10-16",
            "suppress-script": "Latn",
        }

    def test_tag_record_fields(self, index, parsed):
        data = json.loads(dumps_snapshot(index.unique_records(), parsed.file_date))
        klingon = [d for d in data["languages"] if d.get("tag") == "i-klingon"][0]
        assert klingon == {
            "type": "grandfathered",
            "tag": "i-klingon",
            "description": ["Klingon"],
            "added": "1999-05-26",
            "preferred-value": "tlh",
            "scope": ["deprecated"],
        }

    def test_multi_description_record_written_once(self, index, parsed):
        data = json.loads(dumps_snapshot(index.unique_records(), parsed.file_date))
        rozaj = [d for d in data["languages"] if d.get("subtag") == "rozaj"]
        assert len(rozaj) == 1
        assert rozaj[0]["description"] == ["Resian", "Resianic", "Rezijan"]

    def test_missing_file_date(self):
        assert json.loads(dumps_snapshot([], None))["file-date"] == ""


class TestRoundTrip:
    def test_load_then_dump_is_identical(self, index, parsed):
        first = dumps_snapshot(index.unique_records(), parsed.file_date)
        records, file_date = loads_snapshot(first)
        second = dumps_snapshot(TagIndex(records).unique_records(), file_date)
        assert first == second

    def test_loaded_records_match(self, index, parsed):
        records, file_date = loads_snapshot(
            dumps_snapshot(index.unique_records(), parsed.file_date))
        assert file_date == datetime.date(2024, 3, 7)
        by_key = {r.key: r for r in records if r.rectype == SubtagRecordType.Region}
        assert by_key["GB"].comments == parsed.records[13].comments
        ar = [r for r in records if r.key == "ar"][0]
        assert ar.is_macrolanguage
        assert ar.suppress_script == "Arab"

    def test_file_round_trip(self, tmp_path, index, parsed):
        path = tmp_path / "snapshot.json"
        save_snapshot(str(path), index.unique_records(), parsed.file_date)
        records, file_date = load_snapshot(str(path))
        assert file_date == parsed.file_date
        assert [r.key for r in records] == [r.key for r in parsed.records]
        save_snapshot(str(tmp_path / "again.json"), records, file_date)
        assert (tmp_path / "again.json").read_text(encoding="utf8") == \
            path.read_text(encoding="utf8")


class TestLoadsErrors:
    def test_not_json(self):
        with pytest.raises(SnapshotError, match="not valid JSON"):
            loads_snapshot("{nope")

    def test_no_languages_list(self):
        with pytest.raises(SnapshotError):
            loads_snapshot('{"file-date": "2020-01-01", "languages": 3}')
        with pytest.raises(SnapshotError):
            loads_snapshot('[]')

    def test_bad_type(self):
        with pytest.raises(SnapshotError, match="Invalid record type"):
            loads_snapshot('{"languages": [{"type": "dialect", '
                           '"description": ["x"]}]}')

    def test_record_not_a_mapping(self):
        with pytest.raises(SnapshotError):
            loads_snapshot('{"languages": ["en"]}')

    def test_record_without_description_skipped(self):
        records, file_date = loads_snapshot(
            '{"file-date": "2020-01-01", "languages": '
            '[{"type": "language", "subtag": "en"}]}')
        assert records == []
        assert file_date == datetime.date(2020, 1, 1)

    def test_scalar_description_and_scope_accepted(self):
        records, _ = loads_snapshot(
            '{"languages": [{"type": "language", "subtag": "zh", '
            '"description": "Chinese", "scope": "macrolanguage"}]}')
        assert records[0].descriptions == ("Chinese",)
        assert records[0].is_macrolanguage

    @pytest.mark.parametrize("record", [
        '{"type": 5, "description": ["x"]}',
        '{"type": "language", "description": 5}',
        '{"type": "language", "description": ["x", 3]}',
        '{"type": "language", "description": ["x"], "added": 20050101}',
        '{"type": "language", "description": ["x"], "prefix": {"a": 1}}',
        '{"type": "language", "description": ["x"], "subtag": ["en"]}',
    ])
    def test_wrong_field_types(self, record):
        with pytest.raises(SnapshotError, match="Field"):
            loads_snapshot('{"languages": [' + record + ']}')

    def test_unreadable_added_date_is_dropped(self):
        records, _ = loads_snapshot(
            '{"languages": [{"type": "language", "subtag": "en", '
            '"description": ["English"], "added": "sometime"}]}')
        assert records[0].added is None
        assert "added" not in json.loads(dumps_snapshot(records, None))["languages"][0]

    def test_file_not_utf8(self, tmp_path):
        path = tmp_path / "snapshot.json"
        path.write_bytes(b'{"languages": ["\xff"]}')
        with pytest.raises(SnapshotError, match="UTF-8"):
            load_snapshot(str(path))
