#!/usr/bin/env python
# -*- coding: utf-8 -*-

# This software is under a BSD license.  See LICENSE.txt for details.

"""Rows of a string table and the merge rules between languages.

The development language table is rebuilt from the routine calls found in
the sources (EntryMap.merge_calls).  Every other language is then merged
against it (EntryMap.merge_dev): keys no longer used go away, new keys
arrive with the development language text, and existing translations are
left alone.

"""

__all__ = ["NO_COMMENT", "Entry", "Entries", "EntryMap"]

import copy
from pygenstrings.errors import ParseError
from pygenstrings.escapes import print_plist_string

# what genstrings writes when the engineer left the comment empty
NO_COMMENT = "No comment provided by engineer."

class Entry(object):
    """One "key" = "value"; row of a .strings file"""

    def __init__(self, key, value, comment="", filepath="", start_line=0, start_col=0):
        super(Entry, self).__init__()
        self.key = key
        self.value = value
        self.comment = comment
        self.filepath = filepath
        self.start_line = start_line
        self.start_col = start_col

    @classmethod
    def from_routine_call(cls, call):
        """New development language entry for a routine call.

        The comment doubles as the initial value, since that is the text the
        engineer wrote next to the key; without a comment the key is used.

        """
        return cls(key=call.key,
                   value=call.comment if call.comment else call.key,
                   comment=call.comment if call.comment else NO_COMMENT,
                   filepath=call.filepath,
                   start_line=call.start_line,
                   start_col=call.start_col)

    def merge_call(self, call):
        """Copy of this entry with the comment of the routine call using it"""
        out = copy.copy(self)
        out.comment = call.comment if call.comment else NO_COMMENT
        return out

    def merge_dev(self, dev):
        """Copy of this entry with the development language comment.

        The value is kept even when it is still equal to the key: it may
        be a deliberate translation, and the development language value is
        only a placeholder here.

        """
        out = copy.copy(self)
        out.comment = dev.comment
        return out

    def string_value(self, suppress_empty_comment=False):
        s = ""
        if suppress_empty_comment == False or len(self.comment):
            s += "/* %s */\n" % (self.comment)
        s += "%s = %s;\n" % (print_plist_string(self.key), print_plist_string(self.value))
        return s

    def __eq__(self, other):
        if isinstance(other, Entry) == False:
            return NotImplemented
        return (self.key, self.value, self.comment, self.filepath, self.start_line, self.start_col) == \
               (other.key, other.value, other.comment, other.filepath, other.start_line, other.start_col)

    def __ne__(self, other):
        result = self.__eq__(other)
        return result if result is NotImplemented else not result

    __hash__ = None

    def __repr__(self):
        return "Entry(%r, %r, comment=%r, at %s:%d:%d)" % (self.key, self.value, self.comment, self.filepath, self.start_line, self.start_col)

class Entries(list):
    """A list of Entry, in file order unless sorted"""

    def sort_by_key(self):
        """Returns a new Entries sorted by key; equal keys keep their order"""
        return Entries(sorted(self, key=lambda e: e.key))

    def string_value(self, suppress_empty_comment=False):
        return "".join(e.string_value(suppress_empty_comment) for e in self)

    def to_entry_map(self):
        """Builds an EntryMap; a key seen twice raises ParseError at the second one"""
        em = EntryMap()
        for e in self:
            if e.key in em:
                raise ParseError(e.filepath, e.start_line, e.start_col, "duplicated key `%s`" % (e.key))
            em[e.key] = e
        return em

class EntryMap(dict):
    """Maps key to Entry for one table of one lproj"""

    def merge_calls(self, calls):
        """Development language table for the given routine calls.

        Arguments:
        calls -- dictionary mapping key to RoutineCall

        Returns:
        A new EntryMap holding exactly the keys in calls.  Existing entries
        keep their value and take the comment from the call.

        """
        out = EntryMap()
        for key, e in self.items():
            if key in calls:
                out[key] = e.merge_call(calls[key])
        for key, call in calls.items():
            if key not in out:
                out[key] = Entry.from_routine_call(call)
        return out

    def merge_dev(self, dev):
        """This language's table brought in line with the development language.

        Arguments:
        dev -- EntryMap of the development language

        Returns:
        A new EntryMap holding exactly the keys in dev.  Keys this table
        already has keep their value; missing keys are copied from dev.

        """
        out = EntryMap()
        for key, e in self.items():
            if key in dev:
                out[key] = e.merge_dev(dev[key])
        for key, e in dev.items():
            if key not in out:
                out[key] = copy.copy(e)
        return out

    def to_entries(self):
        """Entries sorted by key, ready to print"""
        return Entries(self.values()).sort_by_key()
