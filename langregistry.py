"""
langregistry.py.

Keep a current, parsed copy of the IANA language subtag registry.

The registry is seeded from a local JSON snapshot if one exists and then
refreshed from the IANA web site.  A refresh only replaces the data held
when the downloaded registry has a strictly newer File-Date.  The index
is swapped as a whole, so anyone holding the old index can keep using it.

Run as a script to check or look up language tags, e.g.:

    python3 langregistry.py -t en-GB -t qaa-Latn -l Latn
"""
import sys
import os
import argparse
import enum
import logging
import threading
from collections import namedtuple

import requests

from registryparse import parse_registry, describe_errors
from registrycache import save_snapshot, load_snapshot, SnapshotError
from tagindex import TagIndex
from tagtokenize import tokenize, structural_errors, is_valid_tag
import tagbuild

log = logging.getLogger(__name__)

REGISTRY_URL = ("https://www.iana.org/assignments/language-subtag-registry/"
                "language-subtag-registry")
CACHE_FILE = "language-subtag-registry.json"
FETCH_TIMEOUT = 60
MAX_RETRIES = 3


class RegistryFetchError(Exception):
    """Raised when the registry could not be downloaded."""
    pass


class RegistryConfig(object):
    def __init__(self, url=REGISTRY_URL, cache_file='',
                 timeout=FETCH_TIMEOUT, retries=MAX_RETRIES):
        self._url = url
        self._cache_file = cache_file
        self._timeout = timeout
        self._retries = retries

    @property
    def url(self):
        return self._url

    @url.setter
    def url(self, value):
        self._url = value

    @property
    def cache_file(self):
        """Snapshot file to seed from and write to; empty to disable"""
        return self._cache_file

    @cache_file.setter
    def cache_file(self, value):
        self._cache_file = value or ''

    @property
    def timeout(self):
        return self._timeout

    @timeout.setter
    def timeout(self, value):
        self._timeout = float(value)

    @property
    def retries(self):
        return self._retries

    @retries.setter
    def retries(self, value):
        self._retries = max(1, int(value))


class Notice(enum.IntEnum):
    Ready = 1
    Replaced = 2
    FetchError = 3
    ParseError = 4

    def message(self, detail=''):
        if self == Notice.Ready:
            return "dataset ready"
        elif self == Notice.Replaced:
            return "dataset replaced with newer data"
        elif self == Notice.FetchError:
            return "fetch error: {}".format(detail)
        return "parse error: {}".format(detail)


RefreshResult = namedtuple('RefreshResult', ['replaced', 'notices', 'errors'])


def normalize_language_tag(s):
    """Attempt to modify language tag content to get it into the expected form."""
    return s.replace('_', '-').replace('/', '-')


def fetch_registry(url=REGISTRY_URL, timeout=FETCH_TIMEOUT,
                   retries=MAX_RETRIES):
    """Download the registry text, trying up to retries times."""
    errors = []
    while len(errors) < retries:
        try:
            response = requests.get(url, timeout=timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            errors.append(str(e))
            log.warning("Fetching %s failed (attempt %d of %d): %s",
                        url, len(errors), retries, e)
        else:
            log.info("Fetched %d bytes from %s", len(response.content), url)
            return response.content.decode('utf8', errors='replace')
    raise RegistryFetchError(errors[-1] if errors else
                             "no attempts made to fetch {}".format(url))


class LanguageSubtagRegistry(object):
    def __init__(self, config=None, notify=None):
        self._config = config or RegistryConfig()
        self._notify_cb = notify
        self._index = TagIndex()
        self._file_date = None
        self._lock = threading.Lock()

    @property
    def config(self):
        return self._config

    @property
    def index(self):
        """The current TagIndex.  Never modified; replaced on refresh."""
        return self._index

    @property
    def file_date(self):
        return self._file_date

    def _notify(self, notices, notice, detail=''):
        message = notice.message(detail)
        notices.append((notice, message))
        if notice in (Notice.FetchError, Notice.ParseError):
            log.warning(message)
        else:
            log.info(message)
        if self._notify_cb is not None:
            self._notify_cb(notice, message)

    def update(self, records, file_date, force=False):
        """
        Replace the held data if file_date is newer than the current one.

        Returns True if the data was replaced.  Equal or older dates (and
        no date at all) leave everything as it was unless force is set.
        """
        if file_date is None:
            return False
        index = TagIndex(records)
        with self._lock:
            if not force and self._file_date is not None and \
                    file_date <= self._file_date:
                log.debug("Ignoring registry dated %s; holding %s",
                          file_date, self._file_date)
                return False
            self._index = index
            self._file_date = file_date
        return True

    def read_from_local_file(self, filename=None):
        """Seed from a snapshot file; returns True if it was used."""
        filename = filename or self._config.cache_file
        if not filename or not os.path.exists(filename):
            return False
        records, file_date = load_snapshot(filename)
        notices = []
        used = self.update(records, file_date)
        if used:
            self._notify(notices, Notice.Ready)
        return used

    def save_to_local_file(self, filename=None):
        filename = filename or self._config.cache_file
        save_snapshot(filename, self._index.unique_records(), self._file_date)

    def refresh(self, text=None, force=False):
        """
        Parse registry text (downloading it if text is None) and install
        it if it is newer than the data held.
        """
        notices = []
        if text is None:
            try:
                text = fetch_registry(self._config.url, self._config.timeout,
                                      self._config.retries)
            except RegistryFetchError as e:
                self._notify(notices, Notice.FetchError, str(e))
                return RefreshResult(False, notices, {})

        result = parse_registry(text)
        for message in describe_errors(result.errors):
            self._notify(notices, Notice.ParseError, message)

        had_data = self._file_date is not None
        replaced = self.update(result.records, result.file_date, force)
        if replaced:
            self._notify(notices, Notice.Replaced if had_data else Notice.Ready)
            if self._config.cache_file:
                self.save_to_local_file()
        return RefreshResult(replaced, notices, result.errors)

    def rebuild_from_registry(self):
        """Force a download and rebuild regardless of the held date."""
        return self.refresh(force=True)

    # -- conveniences over the current index

    def lookup(self, subtag):
        return self._index.lookup(subtag)

    def lookup_full_tag(self, tag):
        """Lookup records for each subtag of a full tag, e.g., zh-Hant-CN"""
        objs = []
        for subtag in normalize_language_tag(tag).split('-'):
            if subtag.lower() == 'x':
                break
            objs.append(self._index.lookup(subtag))
        return objs

    def tokenize(self, tag):
        return tokenize(self._index, normalize_language_tag(tag))

    def is_valid_tag(self, tag):
        return is_valid_tag(self._index, normalize_language_tag(tag))

    def language_tag(self, language, region=None):
        return tagbuild.language_tag(self._index, language, region)

    def script_tag(self, language, script):
        return tagbuild.script_tag(self._index, language, script)

    def variant_tag(self, variant, region=None):
        return tagbuild.variant_tag(self._index, variant, region)

    def extlang_tag(self, extlang):
        return tagbuild.extlang_tag(self._index, extlang)

    def __contains__(self, subtag):
        return subtag in self._index

    def __str__(self):
        return "{} ({})".format(self._index, self._file_date)


def _print_tag(registry, tag):
    index = registry.index
    tokens = registry.tokenize(tag)
    print("{}:".format(tag))
    for token in tokens:
        print("  {:>3} {:>3}  {:<20} {}".format(
            token.start, token.length, token.tagtype.name, token.text))
    for token, problem in structural_errors(index, tokens):
        print("  ! {} at {}: {}".format(problem.name, token.start, token.text))
    print("  valid: {}".format(registry.is_valid_tag(tag)))


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Check language tags against the IANA subtag registry.')
    parser.add_argument('-c', '--cache', dest='cache', type=str,
                        default=CACHE_FILE,
                        help='Local JSON snapshot of the registry')
    parser.add_argument('-r', '--registry', dest='registry', type=str,
                        default=None,
                        help='Parse a local registry file instead of fetching')
    parser.add_argument('-u', '--url', dest='url', type=str,
                        default=REGISTRY_URL, help='Registry URL')
    parser.add_argument('-n', '--no-fetch', dest='nofetch',
                        action='store_true', default=False,
                        help="Don't download the registry; use the snapshot")
    parser.add_argument('-s', '--save', dest='save', action='store_true',
                        default=False, help='Write the snapshot file')
    parser.add_argument('-t', '--tag', dest='tags', action='append',
                        default=[], help='Tag to check (may repeat)')
    parser.add_argument('-l', '--lookup', dest='lookups', action='append',
                        default=[], help='Subtag to look up (may repeat)')
    parser.add_argument('-v', '--verbose', dest='verbose', action='count',
                        default=0, help='Turn on verbose output.')
    args = parser.parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format='%(name)s: %(message)s')

    cfg = RegistryConfig()
    cfg.url = args.url
    cfg.cache_file = args.cache if args.save else ''

    registry = LanguageSubtagRegistry(cfg)
    try:
        registry.read_from_local_file(args.cache)
    except (SnapshotError, OSError) as e:
        print("Ignoring snapshot {}: {}".format(args.cache, e))

    result = None
    if args.registry is not None:
        with open(args.registry, encoding='utf8') as infile:
            result = registry.refresh(infile.read())
    elif not args.nofetch:
        result = registry.refresh()
    if result is not None:
        for notice, message in result.notices:
            print(message)

    if registry.file_date is None:
        print("No registry data available.")
        return 1
    print(registry)

    if args.save and (result is None or not result.replaced):
        registry.save_to_local_file(args.cache)

    for subtag in args.lookups:
        if '-' in normalize_language_tag(subtag):
            print("{} -> {}".format(subtag, [str(o) for o in
                                             registry.lookup_full_tag(subtag)]))
        else:
            print("{} -> {}".format(subtag, registry.lookup(subtag)))

    for tag in args.tags:
        _print_tag(registry, tag)
    return 0


if __name__ == '__main__':
    sys.exit(main())
