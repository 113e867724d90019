"""Tests for tagindex.py."""

import pytest

from subtagrecord import SubtagRecordType, SubtagRegistryRecord
from tagindex import TagIndex

SUBTAG_KINDS = (
    SubtagRecordType.Language,
    SubtagRecordType.Extlang,
    SubtagRecordType.Script,
    SubtagRecordType.Region,
    SubtagRecordType.Variant,
)

_BY_SUBTAG = {
    SubtagRecordType.Language: "language_from_subtag",
    SubtagRecordType.Extlang: "extlang_from_subtag",
    SubtagRecordType.Script: "script_from_subtag",
    SubtagRecordType.Region: "region_from_subtag",
    SubtagRecordType.Variant: "variant_from_subtag",
    SubtagRecordType.Grandfathered: "grandfathered_from_tag",
    SubtagRecordType.Redundant: "redundant_from_tag",
}


class TestReachability:
    def test_subtag_records_reachable_by_subtag(self, parsed, index):
        for rec in parsed.records:
            if rec.rectype in SUBTAG_KINDS:
                lookup = getattr(index, _BY_SUBTAG[rec.rectype])
                assert lookup(rec.subtag) is rec, rec

    def test_tag_records_reachable_by_tag(self, parsed, index):
        for rec in parsed.records:
            if rec.rectype.uses_tag:
                lookup = getattr(index, _BY_SUBTAG[rec.rectype])
                assert lookup(rec.tag) is rec, rec

    def test_every_description_reaches_record(self, parsed, index):
        for rec in parsed.records:
            for description in rec.descriptions:
                assert any(r is rec for r in index.from_description(description))

    def test_records_are_shared_not_copied(self, index):
        first = index.variant_from_description("Resian")
        assert index.variant_from_description("Rezijan") is first
        assert index.variant_from_subtag("rozaj") is first


class TestLookups:
    def test_lookup_miss_returns_none(self, index):
        assert index.language_from_subtag("zz") is None
        assert index.region_from_description("Atlantis") is None
        assert index.grandfathered_from_tag("i-unknown") is None
        assert index.language_from_subtag("") is None

    def test_keys_match_registry_spelling(self, index):
        assert index.script_from_subtag("Latn").subtag == "Latn"
        assert index.script_from_subtag("latn") is None
        assert index.region_from_subtag("gb") is None
        assert index.redundant_from_tag("AZ-LATN") is None

    def test_language_and_region_differing_in_case(self):
        index = TagIndex([
            SubtagRegistryRecord({"type": "language", "subtag": "de",
                                  "description": ["German"]}),
            SubtagRegistryRecord({"type": "region", "subtag": "DE",
                                  "description": ["Germany"]}),
        ])
        assert index.lookup("de").description == "German"
        assert index.lookup("DE").description == "Germany"
        assert index.kind_of("DE") == SubtagRecordType.Region
        assert not index.is_primary_language("DE")

    def test_kind_specific_description_lookup(self, index):
        assert index.language_from_description("Yue Chinese").rectype == \
            SubtagRecordType.Language
        assert index.extlang_from_description("Yue Chinese").rectype == \
            SubtagRecordType.Extlang

    def test_combined_description_holds_all_kinds(self, index):
        kinds = sorted(r.rectype for r in index.from_description("Cantonese"))
        assert kinds == [SubtagRecordType.Language, SubtagRecordType.Extlang]

    def test_grandfathered_descriptions_need_not_be_unique(self, index):
        description = "Min, Fuzhou, Hokkien, Amoy, or Taiwanese"
        recs = index.grandfathered_all_from_description(description)
        assert [r.tag for r in recs] == ["zh-min", "zh-min-nan"]
        assert index.grandfathered_from_description(description).tag == "zh-min"
        assert index.grandfathered_descriptions().count(description) == 1

    def test_predicates(self, index):
        assert index.is_primary_language("en")
        assert not index.is_primary_language("Latn")
        assert index.is_extlang("afb")
        assert index.is_script("Cyrl")
        assert index.is_region("419")
        assert index.is_variant("nedis")
        assert index.is_grandfathered("i-klingon")
        assert index.is_redundant("az-Latn")
        assert not index.is_redundant("az")

    def test_kind_of_and_lookup(self, index):
        assert index.kind_of("en") == SubtagRecordType.Language
        assert index.kind_of("yue") == SubtagRecordType.Language
        assert index.kind_of("GB") == SubtagRecordType.Region
        assert index.kind_of("nope") is None
        assert index.lookup("Latn").description == "Latin"
        assert index.lookup("nope") is None
        assert "en" in index
        assert "nope" not in index


class TestPrefixes:
    def test_variants_with_prefix(self, index):
        assert index.variants_with_prefix("sl") == ["Natisone dialect", "Resian"]
        assert index.variants_with_prefix("en") == []

    def test_extlangs_with_prefix(self, index):
        assert index.extlangs_with_prefix("ar") == ["Gulf Arabic"]
        assert index.extlangs_with_prefix("zh") == ["Yue Chinese"]
        assert index.extlangs_with_prefix("AR") == []


class TestListings:
    def test_subtag_listings(self, index):
        assert index.script_subtags() == ["Latn", "Cyrl"]
        assert index.region_subtags() == ["GB", "US", "IT", "419"]
        assert index.variant_subtags() == ["nedis", "rozaj"]
        assert index.extlang_subtags() == ["afb", "yue"]
        assert "en" in index.language_subtags()
        assert index.grandfathered_tags() == ["i-klingon", "zh-min", "zh-min-nan"]
        assert index.redundant_tags() == ["az-Latn"]

    def test_description_listings(self, index):
        assert index.variant_descriptions() == [
            "Natisone dialect", "Nadiza dialect",
            "Resian", "Resianic", "Rezijan"]
        assert "English" in index.language_descriptions()
        assert index.region_descriptions()[0] == "United Kingdom"
        assert index.redundant_descriptions() == ["Azerbaijani in Latin script"]
        assert "Latin" in index.descriptions()
        assert index.script_descriptions() == ["Latin", "Cyrillic"]
        assert index.extlang_descriptions() == [
            "Gulf Arabic", "Yue Chinese", "Cantonese"]

    def test_records_by_type(self, index):
        assert [r.subtag for r in index.records(SubtagRecordType.Script)] == \
            ["Latn", "Cyrl"]


class TestUniqueRecords:
    def test_unique_records_deduplicates_by_identity(self, parsed, index):
        unique = index.unique_records()
        assert len(unique) == len(parsed.records) == 23
        assert len({id(r) for r in unique}) == 23
        assert len(index) == 23

    def test_same_record_passed_twice(self):
        rec = SubtagRegistryRecord({"type": "language", "subtag": "en",
                                    "description": ["English", "Anglais"]})
        index = TagIndex([rec, rec])
        assert index.unique_records() == [rec]
        assert index.from_description("Anglais") == [rec, rec]

    def test_equal_but_distinct_records_are_kept(self):
        fields = {"type": "region", "subtag": "CA", "description": ["Canada"]}
        a = SubtagRegistryRecord(fields)
        b = SubtagRegistryRecord(fields)
        assert TagIndex([a, b]).unique_records() == [a, b]


class TestConstruction:
    def test_empty_index(self):
        index = TagIndex()
        assert len(index) == 0
        assert index.language_from_subtag("en") is None
        assert index.descriptions() == []

    def test_record_without_key_only_in_description_view(self):
        rec = SubtagRegistryRecord({"type": "language",
                                    "description": ["Nameless"]})
        index = TagIndex([rec])
        assert index.language_subtags() == []
        assert index.from_description("Nameless") == [rec]

    def test_str_summary(self, index):
        summary = str(index)
        assert "Language: 9" in summary
        assert "Redundant: 1" in summary

    @pytest.mark.parametrize("subtag", ["EN", "En", "eN"])
    def test_language_lookup_other_case_misses(self, index, subtag):
        assert index.language_from_subtag(subtag) is None
