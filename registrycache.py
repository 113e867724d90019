"""
registrycache.py.

Save and reload a parsed registry as a JSON snapshot, so the registry
does not have to be downloaded and parsed on every start.

The snapshot looks like:

    {
      "file-date": "2024-03-07",
      "languages": [
        {"type": "language", "subtag": "en", "description": ["English"], ...},
        ...
      ]
    }

Record keys are the registry field names; empty values are left out.
"""
import json
import logging

from subtagrecord import SubtagRecordType, SubtagRegistryRecord, parse_date

log = logging.getLogger(__name__)


class SnapshotError(Exception):
    """Raised when a snapshot file does not have the expected structure."""
    pass


def _record_to_dict(rec):
    d = {'type': rec.type_string}
    if rec.subtag:
        d['subtag'] = rec.subtag
    if rec.tag:
        d['tag'] = rec.tag
    if rec.descriptions:
        d['description'] = list(rec.descriptions)
    if rec.added is not None:
        d['added'] = rec.added.isoformat()
    if rec.suppress_script:
        d['suppress-script'] = rec.suppress_script
    if rec.macrolanguage:
        d['macrolanguage'] = rec.macrolanguage
    if rec.preferred_value:
        d['preferred-value'] = rec.preferred_value
    if rec.prefixes:
        d['prefix'] = list(rec.prefixes)
    if rec.scope:
        d['scope'] = rec.scope
    if rec.comments:
        d['comments'] = rec.comments
    return d


_TEXT_FIELDS = ('type', 'subtag', 'tag', 'added', 'suppress-script',
                'macrolanguage', 'preferred-value', 'comments')
_LIST_FIELDS = ('description', 'prefix', 'scope')


def _as_list(value):
    if isinstance(value, str):
        return [value]
    return list(value)


def _check_types(d):
    for name in _TEXT_FIELDS:
        if name in d and not isinstance(d[name], str):
            raise SnapshotError("Field {!r} should be a string, got {!r}".format(
                name, d[name]))
    for name in _LIST_FIELDS:
        value = d.get(name, ())
        if isinstance(value, str):
            continue
        if not isinstance(value, list) or \
                not all(isinstance(v, str) for v in value):
            raise SnapshotError(
                "Field {!r} should be a string or list of strings, "
                "got {!r}".format(name, value))


def _record_from_dict(d):
    if not isinstance(d, dict):
        raise SnapshotError("Expected a record mapping, got {!r}".format(d))
    _check_types(d)
    try:
        rectype = SubtagRecordType.fromstr(d.get('type', ''))
    except ValueError as e:
        raise SnapshotError(str(e))
    rec = dict(d)
    rec['type'] = rectype
    rec['description'] = _as_list(d.get('description', ()))
    rec['prefix'] = _as_list(d.get('prefix', ()))
    rec['scope'] = set(_as_list(d.get('scope', ())))
    return SubtagRegistryRecord(rec)


def dumps_snapshot(records, file_date):
    """Serialize records (already de-duplicated) and the file date."""
    data = {
        'file-date': file_date.isoformat() if file_date else '',
        'languages': [_record_to_dict(rec) for rec in records],
    }
    return json.dumps(data, indent=2, ensure_ascii=False) + '\n'


def loads_snapshot(text):
    """Return (records, file_date) from snapshot text."""
    try:
        data = json.loads(text)
    except ValueError as e:
        raise SnapshotError("Snapshot is not valid JSON: {}".format(e))
    if not isinstance(data, dict) or \
            not isinstance(data.get('languages', []), list):
        raise SnapshotError("Snapshot has no 'languages' list")
    file_date = parse_date(data.get('file-date', ''))
    records = []
    for d in data.get('languages', []):
        rec = _record_from_dict(d)
        if not rec.descriptions:
            log.debug("Skipping snapshot record without description: %r", rec)
            continue
        records.append(rec)
    return records, file_date


def save_snapshot(outfile, records, file_date):
    with open(outfile, 'w', encoding='utf8') as out:
        out.write(dumps_snapshot(records, file_date))
    log.info("Wrote %d records to %s", len(records), outfile)


def load_snapshot(infile):
    try:
        with open(infile, encoding='utf8') as inp:
            text = inp.read()
    except UnicodeDecodeError as e:
        raise SnapshotError("Snapshot is not valid UTF-8: {}".format(e))
    records, file_date = loads_snapshot(text)
    log.info("Loaded %d records (file date %s) from %s",
             len(records), file_date, infile)
    return records, file_date
