#!/usr/bin/env python
# -*- coding: utf-8 -*-

# This software is under a BSD license.  See LICENSE.txt for details.

"""Keeping the .strings files of a project in sync with its sources.

One run goes through these phases, and stops at the first error:

    find      locate the *.lproj directories and the .swift/.m/.h files
    read      parse Info.plist, every Localizable.strings and
              InfoPlist.strings, and scan the sources for routine calls
    validate  reject duplicated keys and inconsistent routine calls
    process   merge: sources into the development language, then the
              development language into every other language
    write     write the merged tables back

Nothing is written unless every file could be read and merged, so a syntax
error in one translation leaves the whole project untouched.

"""

__all__ = ["GenstringsContext", "find_lprojs", "find_source_files",
           "read_file", "write_file", "log_message",
           "DEFAULT_ROUTINE_NAME", "DEFAULT_DEVELOPMENT_LANGUAGE",
           "LOCALIZABLE_STRINGS", "INFO_PLIST_STRINGS"]

import codecs
import os
import re
import stat
import sys
import tempfile

from pygenstrings.dotstrings import parse_dot_strings
from pygenstrings.entries import Entries
from pygenstrings.errors import FileError
from pygenstrings.infoplist import parse_info_plist
from pygenstrings.routinecall import RoutineCalls, parse_routine_calls

DEFAULT_ROUTINE_NAME = "NSLocalizedString"
DEFAULT_DEVELOPMENT_LANGUAGE = "en"

LOCALIZABLE_STRINGS = "Localizable.strings"
INFO_PLIST_STRINGS = "InfoPlist.strings"

_SOURCE_EXTENSIONS = (".swift", ".m", ".h")

def log_message(msg):
    """write a message to standard error"""
    sys.stderr.write("%s: %s\n" % (os.path.basename(sys.argv[0]), msg))

def _log_warning(path, msg):
    sys.stderr.write("%s:0:0: warning: %s\n" % (path, msg))

def _walk(root):
    """os.walk in a stable order"""
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        yield dirpath, dirnames, sorted(filenames)

def find_lprojs(root):
    """Paths of every *.lproj directory below root, except Base.lproj"""
    out = []
    for dirpath, dirnames, filenames in _walk(root):
        for name in dirnames:
            if name.endswith(".lproj") and name != "Base.lproj":
                out.append(os.path.join(dirpath, name))
    return sorted(out)

def _is_regular_file(path):
    # symbolic links are not followed
    return stat.S_ISREG(os.lstat(path).st_mode)

def find_source_files(root, exclude=None):
    """Paths of the Swift and Objective-C files below root.

    Arguments:
    root -- directory to search
    exclude -- compiled regular expression, or None; paths it matches
               anywhere are left out

    """
    out = []
    for dirpath, dirnames, filenames in _walk(root):
        for name in filenames:
            path = os.path.join(dirpath, name)
            if os.path.splitext(name)[1] not in _SOURCE_EXTENSIONS:
                continue
            if _is_regular_file(path) == False:
                continue
            if exclude is not None and exclude.search(path):
                continue
            out.append(path)
    return sorted(out)

def read_file(path):
    """Content of a UTF-8 text file; a leading byte order mark is dropped"""
    with open(path, "rb") as input_file:
        raw = input_file.read()
    if raw.startswith(codecs.BOM_UTF8):
        _log_warning(path, "file starts with a UTF-8 byte order mark")
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise FileError(path, "is not UTF-8 encoded")

def write_file(path, content):
    """Replaces path with content, UTF-8 encoded.

    The data goes to a temporary file in the same directory first, so the
    file is either the old version or the new one, never a partial write.

    """
    directory = os.path.dirname(os.path.abspath(path))
    temp_file = tempfile.NamedTemporaryFile(mode="wb", dir=directory, prefix=".genstrings", delete=False)
    try:
        if os.path.exists(path):
            os.chmod(temp_file.name, stat.S_IMODE(os.stat(path).st_mode))
        with temp_file:
            temp_file.write(content.encode("utf-8"))
        os.replace(temp_file.name, path)
    except OSError:
        os.unlink(temp_file.name)
        raise

def _read_optional_dot_strings(path):
    if os.path.exists(path) == False:
        return Entries()
    return parse_dot_strings(read_file(path), path)

class GenstringsContext(object):
    """One synchronization run over a project directory.

    Arguments:
    root_path -- directory holding the sources and the *.lproj directories
    info_plist_path -- path of Info.plist
    devlang -- development language; its lproj is the reference
    routine_name -- localization routine to look for in the sources
    exclude -- compiled regular expression of source paths to skip, or None
    verbose -- log each file as it is read and written

    The phases can be run one at a time; genstrings() runs them all.
    Intermediate results are kept as attributes, keyed by lproj path.

    """

    def __init__(self, root_path, info_plist_path, devlang=DEFAULT_DEVELOPMENT_LANGUAGE,
                 routine_name=DEFAULT_ROUTINE_NAME, exclude=None, verbose=False):
        super(GenstringsContext, self).__init__()
        self.root_path = root_path
        self.info_plist_path = info_plist_path
        self.devlang = devlang
        self.routine_name = routine_name
        if isinstance(exclude, str):
            exclude = re.compile(exclude)
        self.exclude = exclude
        self.verbose = verbose

        self.lprojs = []
        self.dev_lproj = None
        self.source_file_paths = []

        self.info_plist = None

        # Localizable.strings
        self.in_entries = {}
        self.in_entry_map = {}
        self.out_entry_map = {}

        # InfoPlist.strings
        self.in_info_plist_entries = {}
        self.in_info_plist_entry_map = {}
        self.out_info_plist_entry_map = {}

        self.routine_calls = RoutineCalls()
        self.routine_call_by_key = {}

    def _log(self, msg):
        if self.verbose:
            log_message(msg)

    def find(self):
        self.lprojs = find_lprojs(self.root_path)
        dev_name = self.devlang + ".lproj"
        for lproj in self.lprojs:
            if os.path.basename(lproj) == dev_name:
                self.dev_lproj = lproj
                break
        else:
            raise FileError(os.path.join(self.root_path, dev_name), "directory not found")
        self.source_file_paths = find_source_files(self.root_path, self.exclude)

    def read(self):
        if os.path.exists(self.info_plist_path) == False:
            raise FileError(self.info_plist_path, "file not found")
        self._log("reading %s" % (self.info_plist_path))
        self.info_plist = parse_info_plist(read_file(self.info_plist_path), self.info_plist_path).localizable()

        for lproj in self.lprojs:
            path = os.path.join(lproj, LOCALIZABLE_STRINGS)
            self._log("reading %s" % (path))
            self.in_entries[lproj] = _read_optional_dot_strings(path)

        for lproj in self.lprojs:
            path = os.path.join(lproj, INFO_PLIST_STRINGS)
            self._log("reading %s" % (path))
            self.in_info_plist_entries[lproj] = _read_optional_dot_strings(path)

        for path in self.source_file_paths:
            self._log("scanning %s" % (path))
            self.routine_calls.extend(parse_routine_calls(read_file(path), self.routine_name, path))

    def validate(self):
        for lproj in self.lprojs:
            self.in_entry_map[lproj] = self.in_entries[lproj].to_entry_map()
        for lproj in self.lprojs:
            self.in_info_plist_entry_map[lproj] = self.in_info_plist_entries[lproj].to_entry_map()
        self.routine_call_by_key = self.routine_calls.to_map()

    def process(self):
        dev = self.dev_lproj
        dev_out = self.in_entry_map[dev].merge_calls(self.routine_call_by_key)
        self.out_entry_map[dev] = dev_out
        for lproj in self.lprojs:
            if lproj != dev:
                self.out_entry_map[lproj] = self.in_entry_map[lproj].merge_dev(dev_out)

        dev_info = self.in_info_plist_entry_map[dev].merge_dev(self.info_plist.to_entry_map())
        self.out_info_plist_entry_map[dev] = dev_info
        for lproj in self.lprojs:
            if lproj != dev:
                self.out_info_plist_entry_map[lproj] = self.in_info_plist_entry_map[lproj].merge_dev(dev_info)

    def write(self):
        for lproj in self.lprojs:
            path = os.path.join(lproj, LOCALIZABLE_STRINGS)
            self._log("writing %s" % (path))
            write_file(path, self.out_entry_map[lproj].to_entries().string_value())

        for lproj in self.lprojs:
            path = os.path.join(lproj, INFO_PLIST_STRINGS)
            entry_map = self.out_info_plist_entry_map[lproj]
            if len(entry_map):
                self._log("writing %s" % (path))
                write_file(path, entry_map.to_entries().string_value(suppress_empty_comment=True))
            elif os.path.exists(path):
                self._log("removing %s" % (path))
                os.remove(path)

    def genstrings(self):
        """Runs every phase in order; raises GenstringsError on bad input"""
        self.find()
        self.read()
        self.validate()
        self.process()
        self.write()
