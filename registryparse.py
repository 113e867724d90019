"""
registryparse.py.

Parser for the text form of the IANA language subtag registry.  The
format is described in section 3.1 of RFC5646: a File-Date header, then
records separated by '%%' lines, each record a set of 'Field: value'
lines.  Long values are folded onto following lines.

Parsing never stops on bad input.  Errors are collected per line number
and handed back with whatever records could be recovered.
"""
import enum
import logging
from collections import namedtuple

from subtagrecord import SubtagRecordType, SubtagRegistryRecord, parse_date

log = logging.getLogger(__name__)

FIELD_NAMES = (
    'type',
    'tag',
    'subtag',
    'description',
    'added',
    'suppress-script',
    'prefix',
    'macrolanguage',
    'deprecated',
    'preferred-value',
    'scope',
    'comments',
)

# 'macrolanguge' (sic) has been seen in registry data
_SCOPES = {
    'macrolanguage': 'macrolanguage',
    'macrolanguge': 'macrolanguage',
    'collection': 'collection',
    'deprecated': 'deprecated',
}

SEPARATOR = '%%'


class ParseError(enum.IntFlag):
    NoError = 0
    BadFileDate = 1
    EmptyName = 2
    EmptyValue = 4
    UnknownTagType = 8


_ERROR_TEXT = (
    (ParseError.BadFileDate,
     "The file date is missing or invalid. Possibly corrupt file!"),
    (ParseError.EmptyName, "Bad data line. Has \":\" but missing name!"),
    (ParseError.EmptyValue, "Bad data line. Has \":\" but missing value!"),
    (ParseError.UnknownTagType, "The tag type is not a valid type!"),
)


class _State(enum.IntEnum):
    AwaitingDate = 1
    Idle = 2
    InRecord = 3
    InDescription = 4
    InComment = 5


ParseResult = namedtuple('ParseResult', ['records', 'file_date', 'errors'])


def is_field_name(name):
    """Check (case-insensitively) whether name is a registry field name."""
    return name.strip().lower() in FIELD_NAMES


def describe_errors(errors):
    """Turn a {line: ParseError} mapping into one message per line."""
    messages = []
    for lineno, flags in sorted(errors.items()):
        texts = [text for flag, text in _ERROR_TEXT if flags & flag]
        messages.append("Line {}: {}".format(lineno, ' '.join(texts)))
    return messages


class RegistryParser(object):
    """
    Line-oriented state machine over registry text.

    A parser instance is good for one document; call parse() or use the
    parse_registry() helper.
    """
    def __init__(self):
        self._state = _State.AwaitingDate
        self._current = None
        self._records = []
        self._errors = {}
        self._file_date = None

    def _error(self, lineno, flag):
        self._errors[lineno] = self._errors.get(lineno, ParseError.NoError) | flag

    def _close_record(self):
        rec = self._current
        self._current = None
        if rec is None:
            return
        if 'type' not in rec or not rec.get('description'):
            log.debug("Discarding incomplete record %s",
                      rec.get('subtag') or rec.get('tag') or '?')
            return
        self._records.append(SubtagRegistryRecord(rec))

    def _fold(self, text):
        if self._current is None:
            return
        if self._state == _State.InDescription:
            descriptions = self._current['description']
            descriptions[-1] = "{}\n{}".format(descriptions[-1], text)
        elif self._state == _State.InComment:
            self._current['comments'] = "{}\n{}".format(
                self._current.get('comments', ''), text)

    def _in_continuation(self):
        return self._state in (_State.InDescription, _State.InComment)

    def _read_file_date(self, lineno, line):
        """Handle the first substantive line; return True if consumed."""
        self._state = _State.Idle
        name, sep, value = line.partition(':')
        if sep and name.strip().lower() == 'file-date':
            self._file_date = parse_date(value)
            if self._file_date is None:
                self._error(lineno, ParseError.BadFileDate)
            return True
        self._error(lineno, ParseError.BadFileDate)
        return False

    def _set_field(self, lineno, name, value):
        rec = self._current
        if name == 'type':
            try:
                rec['type'] = SubtagRecordType.fromstr(value)
            except ValueError:
                self._error(lineno, ParseError.UnknownTagType)
        elif name == 'description':
            rec.setdefault('description', []).append(value)
            self._state = _State.InDescription
        elif name == 'comments':
            rec['comments'] = value
            self._state = _State.InComment
        elif name == 'prefix':
            rec.setdefault('prefix', []).append(value)
        elif name == 'scope':
            scope = _SCOPES.get(value.lower())
            if scope is not None:
                rec.setdefault('scope', set()).add(scope)
        elif name == 'deprecated':
            rec.setdefault('scope', set()).add('deprecated')
        elif name == 'added':
            rec['added'] = parse_date(value)
        else:
            rec[name] = value

    def feed_line(self, lineno, line):
        line = line.rstrip('\r')
        stripped = line.strip()
        if not stripped:
            return

        if self._state == _State.AwaitingDate:
            if self._read_file_date(lineno, stripped):
                return

        if stripped == SEPARATOR:
            self._close_record()
            self._current = {}
            self._state = _State.InRecord
            return

        name, sep, value = stripped.partition(':')
        if not sep:
            self._fold(stripped)
            return

        name = name.strip().lower()
        value = value.strip()
        if name not in FIELD_NAMES:
            if self._in_continuation():
                self._fold(stripped)
            elif not name:
                flags = ParseError.EmptyName
                if not value:
                    flags |= ParseError.EmptyValue
                self._error(lineno, flags)
            else:
                self._error(lineno, ParseError.UnknownTagType)
            return

        if not value:
            self._error(lineno, ParseError.EmptyValue)
            return
        if self._current is None:
            # fields before the first record separator
            return
        self._set_field(lineno, name, value)

    def parse(self, text):
        """
        Parse registry text (str or utf8 bytes).

        Returns a ParseResult of (records, file_date, errors) where errors
        maps 1-based line numbers to ParseError flags.
        """
        if isinstance(text, bytes):
            # undecodable bytes become U+FFFD rather than failing the whole parse
            text = text.decode('utf8', errors='replace')
        for lineno, line in enumerate(text.split('\n'), start=1):
            self.feed_line(lineno, line)
        self._close_record()
        if self._errors:
            log.warning("Registry parsed with errors on %d line(s)",
                        len(self._errors))
        log.debug("Parsed %d records, file date %s",
                  len(self._records), self._file_date)
        return ParseResult(list(self._records), self._file_date,
                           dict(sorted(self._errors.items())))

    @staticmethod
    def parse_file(infile):
        with open(infile, encoding='utf8', errors='replace') as inp:
            return RegistryParser().parse(inp.read())


def parse_registry(text):
    return RegistryParser().parse(text)
