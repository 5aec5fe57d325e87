#!/usr/bin/env python
# -*- coding: utf-8 -*-

# This software is under a BSD license.  See LICENSE.txt for details.

"""Parsers for .strings files and property lists, and a genstrings
replacement that keeps every lproj of a project in sync with the
NSLocalizedString calls in its Swift and Objective-C sources."""

from pygenstrings.errors import GenstringsError, FileLineColError, FileError, \
     LexError, ParseError, RoutineCallError
from pygenstrings.linecol import LineColer
from pygenstrings.escapes import print_plist_string
from pygenstrings.asciiplist import parse_ascii_plist
from pygenstrings.xmlplist import parse_xml_plist
from pygenstrings.dotstrings import parse_dot_strings
from pygenstrings.routinecall import RoutineCall, RoutineCalls, parse_routine_calls
from pygenstrings.entries import Entry, Entries, EntryMap
from pygenstrings.infoplist import InfoPlist, parse_info_plist
from pygenstrings.genstrings import GenstringsContext

__version__ = "1.0.0"
