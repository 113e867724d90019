"""
tagtokenize.py.

Split a language tag into its subtags and classify each one against a
TagIndex and the BCP47 private use ranges.

tokenize() only classifies; it never rejects input.  Ordering and
duplication problems are reported separately by structural_errors().
"""
import enum
from collections import namedtuple


class TagType(enum.IntEnum):
    PrimaryLanguage = 1
    PrivateLanguage = 2
    ExtendedLanguage = 3
    ScriptLanguage = 4
    PrivateScript = 5
    RegionalLanguage = 6
    PrivateRegion = 7
    VariantLanguage = 8
    GrandfatheredLanguage = 9
    RedundantLanguage = 10
    BadSubtag = 11

    # problems reported by structural_errors()
    SubtagOutOfPosition = 20
    DuplicateExtended = 21
    ExtendedFollowsScript = 22
    ExtendedFollowsRegion = 23
    ExtlangMismatch = 24
    DuplicateScript = 25
    DuplicateRegion = 26


TagToken = namedtuple('TagToken', ['tagtype', 'start', 'length', 'text'])


def strip_whitespace(s):
    return ''.join(s.split())


def _in_range(value, size, low, high):
    return len(value) == size and value.isascii() and value.isalpha() and \
        low <= value.lower() <= high


def is_private_language(value):
    """'i', 'x' or a private use language in qaa..qtz"""
    return value.lower() in ('i', 'x') or _in_range(value, 3, 'qaa', 'qtz')


def is_private_script(value):
    return _in_range(value, 4, 'qaaa', 'qabx')


def is_private_region(value):
    value = value.lower()
    return value in ('aa', 'zz') or \
        _in_range(value, 2, 'qm', 'qz') or \
        _in_range(value, 2, 'xa', 'xz')


def check_primary_language(index, value):
    if is_private_language(value):
        return TagType.PrivateLanguage
    elif index.is_primary_language(value):
        return TagType.PrimaryLanguage
    return None


def check_extended_language(index, value):
    if index.is_extlang(value):
        return TagType.ExtendedLanguage
    return None


def check_script(index, value):
    if index.is_script(value):
        return TagType.ScriptLanguage
    elif is_private_script(value):
        return TagType.PrivateScript
    return None


def check_region(index, value):
    if index.is_region(value):
        return TagType.RegionalLanguage
    elif is_private_region(value):
        return TagType.PrivateRegion
    return None


def check_variant(index, value):
    if index.is_variant(value):
        return TagType.VariantLanguage
    return None


def check_grandfathered(index, value):
    if index.is_grandfathered(value):
        return TagType.GrandfatheredLanguage
    return None


def check_redundant(index, value):
    if index.is_redundant(value):
        return TagType.RedundantLanguage
    return None


_CHECKS = (
    check_primary_language,
    check_extended_language,
    check_script,
    check_region,
)


def classify(index, subtag):
    """Classify a single subtag; first matching check wins."""
    for check in _CHECKS:
        tagtype = check(index, subtag)
        if tagtype is not None:
            return tagtype
    return TagType.BadSubtag


def tokenize(index, tag):
    """
    Return a list of TagToken, one per dash-separated subtag of tag.

    All whitespace is removed first and offsets refer to the stripped
    string.  Empty subtags (from a doubled or trailing dash) are kept as
    zero-length BadSubtag tokens.
    """
    value = strip_whitespace(tag)
    if not value:
        return []
    tokens = []
    start = 0
    for subtag in value.split('-'):
        if subtag:
            tagtype = classify(index, subtag)
        else:
            tagtype = TagType.BadSubtag
        tokens.append(TagToken(tagtype, start, len(subtag), subtag))
        start += len(subtag) + 1
    return tokens


def structural_errors(index, tokens):
    """
    Check subtag order and repetition in a token list.

    Returns a list of (token, TagType) problems, empty if none were found.
    Subtags after an 'x' singleton are private use and not checked.
    Registered variants are accepted wherever a bad subtag would be
    reported.
    """
    problems = []
    primary = None
    seen = set()
    for i, token in enumerate(tokens):
        tagtype = token.tagtype
        text = token.text
        if i > 0 and text.lower() == 'x':
            break

        if i == 0:
            if tagtype in (TagType.PrimaryLanguage, TagType.PrivateLanguage):
                primary = text
            elif tagtype == TagType.BadSubtag:
                problems.append((token, TagType.BadSubtag))
            else:
                problems.append((token, TagType.SubtagOutOfPosition))
            if text.lower() == 'x':
                break
            continue

        # three letter subtags may be registered as both language and extlang
        if tagtype == TagType.PrimaryLanguage and index.is_extlang(text):
            tagtype = TagType.ExtendedLanguage

        if tagtype in (TagType.PrimaryLanguage, TagType.PrivateLanguage):
            problems.append((token, TagType.SubtagOutOfPosition))
        elif tagtype == TagType.ExtendedLanguage:
            if TagType.ExtendedLanguage in seen:
                problems.append((token, TagType.DuplicateExtended))
            elif TagType.ScriptLanguage in seen:
                problems.append((token, TagType.ExtendedFollowsScript))
            elif TagType.RegionalLanguage in seen:
                problems.append((token, TagType.ExtendedFollowsRegion))
            else:
                rec = index.extlang_from_subtag(text)
                if primary not in rec.prefixes:
                    problems.append((token, TagType.ExtlangMismatch))
            seen.add(TagType.ExtendedLanguage)
        elif tagtype in (TagType.ScriptLanguage, TagType.PrivateScript):
            if TagType.ScriptLanguage in seen:
                problems.append((token, TagType.DuplicateScript))
            elif TagType.RegionalLanguage in seen:
                problems.append((token, TagType.SubtagOutOfPosition))
            seen.add(TagType.ScriptLanguage)
        elif tagtype in (TagType.RegionalLanguage, TagType.PrivateRegion):
            if TagType.RegionalLanguage in seen:
                problems.append((token, TagType.DuplicateRegion))
            seen.add(TagType.RegionalLanguage)
        elif check_variant(index, text) is None:
            problems.append((token, TagType.BadSubtag))
    return problems


def is_valid_tag(index, tag):
    """
    True if tag is a registered grandfathered/redundant tag, or tokenizes
    without any structural problem.
    """
    value = strip_whitespace(tag)
    if check_grandfathered(index, value) or check_redundant(index, value):
        return True
    tokens = tokenize(index, value)
    return bool(tokens) and not structural_errors(index, tokens)


def has_bad_subtag(tokens):
    return any(t.tagtype == TagType.BadSubtag for t in tokens)
