#!/usr/bin/env python
# -*- coding: utf-8 -*-

# This software is under a BSD license.  See LICENSE.txt for details.

"""Regenerates Localizable.strings and InfoPlist.strings for every lproj.

Run from an Xcode build phase (or by hand) in the directory holding the
*.lproj directories.  Keys come from the NSLocalizedString calls in the
sources and from the localizable Info.plist keys; translations already in
the other languages are kept, missing ones are filled in with the
development language text, and keys no longer used are dropped.

Problems are reported as "path:line:col: error: message" so Xcode shows
them in the issue navigator.

"""

from optparse import OptionParser
import os
import re
import sys

from pygenstrings.errors import GenstringsError
from pygenstrings.genstrings import GenstringsContext, log_message, \
     DEFAULT_ROUTINE_NAME, DEFAULT_DEVELOPMENT_LANGUAGE

def main(argv=None):

    parser = OptionParser(usage="%prog [options]")
    parser.add_option("-r", "--root", help="directory holding the sources and lproj directories", action="store", type="string", dest="root", default=".")
    parser.add_option("-i", "--infoplist", help="path of Info.plist (default ROOT/Info.plist)", action="store", type="string", dest="info_plist")
    parser.add_option("-d", "--devlang", help="development language (default %s)" % (DEFAULT_DEVELOPMENT_LANGUAGE), action="store", type="string", dest="devlang", default=DEFAULT_DEVELOPMENT_LANGUAGE)
    parser.add_option("--routine", help="localization routine (default %s)" % (DEFAULT_ROUTINE_NAME), action="store", type="string", dest="routine_name", default=DEFAULT_ROUTINE_NAME)
    parser.add_option("-e", "--exclude", help="regular expression of source paths to skip", action="store", type="string", dest="exclude")
    parser.add_option("-v", "--verbose", help="log each file read and written", action="store_true", dest="verbose", default=False)

    (options, args) = parser.parse_args(argv)

    if len(args):
        parser.error("unexpected argument %s" % (args[0]))

    exclude = None
    if options.exclude is not None:
        try:
            exclude = re.compile(options.exclude)
        except re.error as e:
            parser.error("invalid exclude pattern: %s" % (e))

    info_plist_path = options.info_plist
    if info_plist_path is None:
        info_plist_path = os.path.join(options.root, "Info.plist")

    ctx = GenstringsContext(options.root, info_plist_path, options.devlang, options.routine_name, exclude, options.verbose)
    try:
        ctx.genstrings()
    except GenstringsError as e:
        sys.stderr.write("%s\n" % (e.diagnostic()))
        return 1

    if options.verbose:
        log_message("updated %d lproj directories" % (len(ctx.lprojs)))
    return 0

if __name__ == '__main__':
    exit(main())
