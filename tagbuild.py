"""
tagbuild.py.

Compose tags from subtags or registry descriptions, e.g.
language_tag(index, 'English', 'United States') -> 'en-US'.

Every function returns None, never a partial tag, if a name does not
resolve.
"""
from subtagrecord import SubtagRecordType


def _resolve(index, rectype, name):
    """Find a record by subtag (or tag), falling back to its description."""
    if not name:
        return None
    by_key = {
        SubtagRecordType.Language: index.language_from_subtag,
        SubtagRecordType.Extlang: index.extlang_from_subtag,
        SubtagRecordType.Script: index.script_from_subtag,
        SubtagRecordType.Region: index.region_from_subtag,
        SubtagRecordType.Variant: index.variant_from_subtag,
    }
    by_description = {
        SubtagRecordType.Language: index.language_from_description,
        SubtagRecordType.Extlang: index.extlang_from_description,
        SubtagRecordType.Script: index.script_from_description,
        SubtagRecordType.Region: index.region_from_description,
        SubtagRecordType.Variant: index.variant_from_description,
    }
    rec = by_key[rectype](name)
    if rec is None:
        rec = by_description[rectype](name)
    return rec


def language_tag(index, language, region=None):
    """Return e.g. 'en' or, with a region, 'en-US'."""
    lang = _resolve(index, SubtagRecordType.Language, language)
    if lang is None:
        return None
    if not region:
        return lang.subtag
    reg = _resolve(index, SubtagRecordType.Region, region)
    if reg is None:
        return None
    return "{}-{}".format(lang.subtag, reg.subtag)


def script_tag(index, language, script):
    """
    Return the tag for a language written in a script, e.g. 'az-Latn'.

    If the script record carries a prefix the result is
    prefix-script-language.  A script that is the language's
    Suppress-Script is left out.
    """
    lang = _resolve(index, SubtagRecordType.Language, language)
    scr = _resolve(index, SubtagRecordType.Script, script)
    if lang is None or scr is None:
        return None
    if scr.prefixes:
        return "{}-{}-{}".format(scr.prefixes[0], scr.subtag, lang.subtag)
    if lang.suppress_script == scr.subtag:
        return lang.subtag
    return "{}-{}".format(lang.subtag, scr.subtag)


def variant_tag(index, variant, region=None):
    """Return e.g. 'sl-nedis' or, with a region, 'sl-IT-nedis'."""
    var = _resolve(index, SubtagRecordType.Variant, variant)
    if var is None or not var.prefixes:
        return None
    if not region:
        return "{}-{}".format(var.prefixes[0], var.subtag)
    reg = _resolve(index, SubtagRecordType.Region, region)
    if reg is None:
        return None
    return "{}-{}-{}".format(var.prefixes[0], reg.subtag, var.subtag)


def extlang_tag(index, extlang):
    """Return e.g. 'ar-afb' for Gulf Arabic."""
    ext = _resolve(index, SubtagRecordType.Extlang, extlang)
    if ext is None or not ext.prefixes:
        return None
    return "{}-{}".format(ext.prefixes[0], ext.preferred_value or ext.subtag)
