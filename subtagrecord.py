"""
subtagrecord.py.

Record types for entries of the IANA language subtag registry
(https://www.iana.org/assignments/language-subtag-registry).
"""
import enum
import datetime


class SubtagRecordType(enum.IntEnum):
    Language = 1
    Extlang = 2
    Script = 3
    Region = 4
    Variant = 5
    Grandfathered = 6
    Redundant = 7

    @staticmethod
    def fromstr(s):
        if not isinstance(s, str):
            raise ValueError("Invalid record type {!r}".format(s))
        s = s.strip().lower()
        for rectype in SubtagRecordType:
            if rectype.name.lower() == s:
                return rectype
        raise ValueError("Invalid record type {}".format(s))

    @property
    def uses_tag(self):
        """Grandfathered and redundant records are keyed by a full tag"""
        return self in (SubtagRecordType.Grandfathered,
                        SubtagRecordType.Redundant)


def parse_date(s):
    """Return a date for an ISO yyyy-mm-dd string, or None."""
    try:
        return datetime.date.fromisoformat(s.strip())
    except (ValueError, AttributeError):
        return None


class SubtagRegistryRecord(object):
    """
    One record of the registry.

    Built from a dict of registry field names (lower case) to values;
    Description and Prefix are lists since they may repeat.  Records are
    read-only once built and are shared by every index entry that refers
    to them.
    """
    __slots__ = ('_type', '_subtag', '_tag', '_descriptions', '_added',
                 '_suppress_script', '_macrolanguage', '_preferred_value',
                 '_prefixes', '_comments', '_macrolanguage_flag',
                 '_collection', '_deprecated')

    def __init__(self, rec):
        rectype = rec.get('type')
        if not isinstance(rectype, SubtagRecordType):
            rectype = SubtagRecordType.fromstr(rectype or '')
        self._type = rectype
        self._subtag = rec.get('subtag', '')
        self._tag = rec.get('tag', '')
        self._descriptions = tuple(rec.get('description', ()))
        added = rec.get('added')
        if isinstance(added, str):
            added = parse_date(added)
        self._added = added
        self._suppress_script = rec.get('suppress-script', '')
        self._macrolanguage = rec.get('macrolanguage', '')
        self._preferred_value = rec.get('preferred-value', '')
        self._prefixes = tuple(rec.get('prefix', ()))
        self._comments = rec.get('comments', '')
        scope = rec.get('scope', ())
        self._macrolanguage_flag = 'macrolanguage' in scope
        self._collection = 'collection' in scope
        self._deprecated = 'deprecated' in scope

    @property
    def rectype(self):
        return self._type

    @property
    def type_string(self):
        return self._type.name.lower()

    @property
    def subtag(self):
        return self._subtag

    @property
    def tag(self):
        """
        Return the full tag of a grandfathered or redundant record.

        Use preferred_value to get the tag that should be used instead.
        """
        return self._tag

    @property
    def key(self):
        """The value this record is indexed by: tag or subtag, per type"""
        if self._type.uses_tag:
            return self._tag
        return self._subtag

    @property
    def description(self):
        """The primary (first) description"""
        if self._descriptions:
            return self._descriptions[0]
        return ''

    @property
    def descriptions(self):
        return self._descriptions

    @property
    def added(self):
        return self._added

    @property
    def suppress_script(self):
        return self._suppress_script

    def has_suppress_script(self):
        return bool(self._suppress_script)

    @property
    def macrolanguage(self):
        """Subtag of the macrolanguage this record belongs to, if any"""
        return self._macrolanguage

    @property
    def preferred_value(self):
        return self._preferred_value

    def has_preferred_value(self):
        return bool(self._preferred_value)

    @property
    def prefixes(self):
        return self._prefixes

    @property
    def comments(self):
        return self._comments

    def has_comments(self):
        return bool(self._comments)

    @property
    def is_macrolanguage(self):
        return self._macrolanguage_flag

    @property
    def is_collection(self):
        return self._collection

    @property
    def is_deprecated(self):
        return self._deprecated

    def is_language(self):
        return self._type == SubtagRecordType.Language

    @property
    def scope(self):
        """Scope names set on this record, in a fixed order"""
        scope = []
        if self._macrolanguage_flag:
            scope.append('macrolanguage')
        if self._collection:
            scope.append('collection')
        if self._deprecated:
            scope.append('deprecated')
        return scope

    def __repr__(self):
        return "SubtagRegistryRecord({}, {!r})".format(
            self._type.name, self.key)

    def __str__(self):
        return "{} {} ({})".format(self.key, self.description,
                                   self._type.name)
