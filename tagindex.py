"""
tagindex.py.

Read-only lookup tables over a set of registry records.  An index is
built once from the records of one registry import and never changed;
a newer import builds a new index.
"""
from collections import defaultdict

from subtagrecord import SubtagRecordType

# order used when classifying a bare subtag of unknown type
_KIND_ORDER = (
    SubtagRecordType.Language,
    SubtagRecordType.Extlang,
    SubtagRecordType.Variant,
    SubtagRecordType.Region,
    SubtagRecordType.Script,
    SubtagRecordType.Grandfathered,
    SubtagRecordType.Redundant,
)


class TagIndex(object):
    def __init__(self, records=()):
        self._records = list(records)
        self._by_description = defaultdict(list)
        self._kind_by_description = {rectype: {} for rectype in SubtagRecordType}
        self._kind_by_key = {rectype: {} for rectype in SubtagRecordType}
        # some grandfathered descriptions are not unique
        self._grandfathered_by_description = defaultdict(list)

        for rec in self._records:
            rectype = rec.rectype
            for description in rec.descriptions:
                self._by_description[description].append(rec)
                if rectype == SubtagRecordType.Grandfathered:
                    self._grandfathered_by_description[description].append(rec)
                self._kind_by_description[rectype].setdefault(description, rec)
            # keys match as spelled: "de" is a language, "DE" a region
            if rec.key:
                self._kind_by_key[rectype].setdefault(rec.key, rec)

    def _from_key(self, rectype, key):
        if not key:
            return None
        return self._kind_by_key[rectype].get(key, None)

    def _from_description(self, rectype, description):
        return self._kind_by_description[rectype].get(description, None)

    def _has_key(self, rectype, key):
        return bool(key) and key in self._kind_by_key[rectype]

    def records(self, rectype):
        """All records of one type, keyed ones only, in registry order."""
        return list(self._kind_by_key[rectype].values())

    def unique_records(self):
        """
        Records with duplicates removed, in first-seen order.

        A record with several descriptions is reachable through several
        description keys; it appears here once.  Comparison is by identity.
        """
        seen = set()
        unique = []
        for rec in self._records:
            if rec.descriptions and id(rec) not in seen:
                seen.add(id(rec))
                unique.append(rec)
        return unique

    # -- combined description view

    def descriptions(self):
        return list(self._by_description.keys())

    def from_description(self, description):
        """
        All records with the given description, of any type.

        There may be more than one: e.g., a language and a region can share
        a name.
        """
        return list(self._by_description.get(description, ()))

    # -- lookups by description

    def language_from_description(self, description):
        return self._from_description(SubtagRecordType.Language, description)

    def extlang_from_description(self, description):
        return self._from_description(SubtagRecordType.Extlang, description)

    def script_from_description(self, description):
        return self._from_description(SubtagRecordType.Script, description)

    def region_from_description(self, description):
        return self._from_description(SubtagRecordType.Region, description)

    def variant_from_description(self, description):
        return self._from_description(SubtagRecordType.Variant, description)

    def grandfathered_from_description(self, description):
        return self._from_description(SubtagRecordType.Grandfathered,
                                      description)

    def grandfathered_all_from_description(self, description):
        return list(self._grandfathered_by_description.get(description, ()))

    def redundant_from_description(self, description):
        return self._from_description(SubtagRecordType.Redundant, description)

    # -- lookups by subtag or tag

    def language_from_subtag(self, subtag):
        return self._from_key(SubtagRecordType.Language, subtag)

    def extlang_from_subtag(self, subtag):
        return self._from_key(SubtagRecordType.Extlang, subtag)

    def script_from_subtag(self, subtag):
        return self._from_key(SubtagRecordType.Script, subtag)

    def region_from_subtag(self, subtag):
        return self._from_key(SubtagRecordType.Region, subtag)

    def variant_from_subtag(self, subtag):
        return self._from_key(SubtagRecordType.Variant, subtag)

    def grandfathered_from_tag(self, tag):
        return self._from_key(SubtagRecordType.Grandfathered, tag)

    def redundant_from_tag(self, tag):
        return self._from_key(SubtagRecordType.Redundant, tag)

    # -- predicates

    def is_primary_language(self, subtag):
        return self._has_key(SubtagRecordType.Language, subtag)

    def is_extlang(self, subtag):
        return self._has_key(SubtagRecordType.Extlang, subtag)

    def is_script(self, subtag):
        return self._has_key(SubtagRecordType.Script, subtag)

    def is_region(self, subtag):
        return self._has_key(SubtagRecordType.Region, subtag)

    def is_variant(self, subtag):
        return self._has_key(SubtagRecordType.Variant, subtag)

    def is_grandfathered(self, tag):
        return self._has_key(SubtagRecordType.Grandfathered, tag)

    def is_redundant(self, tag):
        return self._has_key(SubtagRecordType.Redundant, tag)

    def kind_of(self, value):
        """Return the record type for a subtag or tag, or None if unknown."""
        for rectype in _KIND_ORDER:
            if self._has_key(rectype, value):
                return rectype
        return None

    def lookup(self, subtag):
        """Get the record for a subtag (e.g., en, es, CN, Latn) of any type"""
        rectype = self.kind_of(subtag)
        if rectype is None:
            return None
        return self._from_key(rectype, subtag)

    # -- prefix scans

    def _with_prefix(self, rectype, subtag):
        return [rec.description for rec in self._kind_by_key[rectype].values()
                if subtag in rec.prefixes]

    def extlangs_with_prefix(self, subtag):
        """Descriptions of the extlangs that may follow subtag."""
        return self._with_prefix(SubtagRecordType.Extlang, subtag)

    def variants_with_prefix(self, subtag):
        """Descriptions of the variants that may follow subtag."""
        return self._with_prefix(SubtagRecordType.Variant, subtag)

    # -- listings

    def _descriptions(self, rectype):
        return list(self._kind_by_description[rectype].keys())

    def _keys(self, rectype):
        return [rec.key for rec in self._kind_by_key[rectype].values()]

    def language_descriptions(self):
        return self._descriptions(SubtagRecordType.Language)

    def language_subtags(self):
        return self._keys(SubtagRecordType.Language)

    def extlang_descriptions(self):
        return self._descriptions(SubtagRecordType.Extlang)

    def extlang_subtags(self):
        return self._keys(SubtagRecordType.Extlang)

    def script_descriptions(self):
        return self._descriptions(SubtagRecordType.Script)

    def script_subtags(self):
        return self._keys(SubtagRecordType.Script)

    def region_descriptions(self):
        return self._descriptions(SubtagRecordType.Region)

    def region_subtags(self):
        return self._keys(SubtagRecordType.Region)

    def variant_descriptions(self):
        return self._descriptions(SubtagRecordType.Variant)

    def variant_subtags(self):
        return self._keys(SubtagRecordType.Variant)

    def grandfathered_descriptions(self):
        return list(self._grandfathered_by_description.keys())

    def grandfathered_tags(self):
        return self._keys(SubtagRecordType.Grandfathered)

    def redundant_descriptions(self):
        return self._descriptions(SubtagRecordType.Redundant)

    def redundant_tags(self):
        return self._keys(SubtagRecordType.Redundant)

    def __len__(self):
        return len(self.unique_records())

    def __contains__(self, subtag):
        """Check whether the index holds the given subtag (any type)"""
        return self.kind_of(subtag) is not None

    def __str__(self):
        result = []
        for rectype in SubtagRecordType:
            result.append("{}: {}".format(rectype.name,
                                          len(self._kind_by_key[rectype])))
        return ', '.join(result)
