#!/usr/bin/env python
# -*- coding: utf-8 -*-

# This software is under a BSD license.  See LICENSE.txt for details.

"""The localizable part of Info.plist.

Only a few Info.plist keys are shown to the user and belong in
InfoPlist.strings: the bundle display name and the permission prompts
(NSCameraUsageDescription and friends).  Values that are build settings,
like $(PRODUCT_NAME), are filled in by Xcode and cannot be translated.

"""

__all__ = ["InfoPlist", "is_localizable_key", "is_value_variable",
           "info_plist_from_xml_value", "parse_info_plist"]

from pygenstrings.entries import Entry, EntryMap
from pygenstrings.errors import ParseError
from pygenstrings.xmlplist import parse_xml_plist

def is_localizable_key(key):
    return key.endswith("UsageDescription") or key == "CFBundleDisplayName"

def is_value_variable(value):
    return value.startswith("$(") and value.endswith(")")

class InfoPlist(dict):
    """Maps Info.plist key to its string value"""

    def localizable(self):
        """Returns a new InfoPlist with the keys that need translating"""
        out = InfoPlist()
        for key, value in self.items():
            if is_localizable_key(key) and is_value_variable(value) == False:
                out[key] = value
        return out

    def to_entry_map(self):
        """EntryMap with one uncommented entry per key"""
        out = EntryMap()
        for key, value in self.items():
            out[key] = Entry(key=key, value=value)
        return out

def info_plist_from_xml_value(value, filepath=""):
    """Builds an InfoPlist from a parsed XML property list.

    Arguments:
    value -- root XMLPlistValue, which must be a dict
    filepath -- used in diagnostics only

    Returns:
    InfoPlist of the string values; values of other types are left out.

    """

    if isinstance(value.value, dict) == False:
        raise ParseError(filepath, value.line, value.col, "unexpected %s; expected <dict>" % (value))
    out = InfoPlist()
    for key, node in value.value.items():
        if isinstance(node.value, str):
            out[key] = node.value
    return out

def parse_info_plist(src, filepath=""):
    """Parses Info.plist content into an InfoPlist of its string values"""
    return info_plist_from_xml_value(parse_xml_plist(src, filepath), filepath)
