#!/usr/bin/env python
# -*- coding: utf-8 -*-

# This software is under a BSD license.  See LICENSE.txt for details.

"""Reading .strings files (Localizable.strings, InfoPlist.strings).

A .strings file is an ASCII property list holding a single flat dict of
string keys and string values, normally without the enclosing braces:

    /* Title of the main window */
    "window.title" = "TeX Live Utility";

The lexer grammar here is narrower than the full plist one: only quoted
strings, "=", ";", comments and whitespace are allowed, so a stray bare word
or brace is reported where it occurs instead of being parsed as some other
plist value.

"""

__all__ = ["lex_dot_strings", "parse_dot_strings"]

from pygenstrings.asciiplist import ASCIIPlistParser, ASCIIPlistDict
from pygenstrings.entries import Entry, Entries
from pygenstrings.errors import ParseError
from pygenstrings.escapes import decode_plist_escape
from pygenstrings.lexer import Lexer, PUNCTUATION, is_space, lex_comment, \
     lex_spaces, lex_quoted_string

def lex_dot_strings(l):
    if l.has_prefix("/*"):
        return lex_comment(lex_dot_strings)
    c = l.next()
    if c is None:
        return l.eof()
    if c == "\"":
        l.backup()
        return lex_quoted_string(decode_plist_escape, lex_dot_strings, multiline=True)
    if c in "=;":
        l.emit(PUNCTUATION[c])
        return lex_dot_strings
    if is_space(c):
        l.backup()
        return lex_spaces(lex_dot_strings)
    return l.unexpected_character(c)

def parse_dot_strings(src, filepath=""):
    """Parses the content of a .strings file.

    Arguments:
    src -- file content
    filepath -- used in diagnostics and stored in each entry

    Returns:
    Entries in file order.  Each entry is positioned at its key and carries
    the comment written before the key, trimmed of whitespace.

    """

    lexer = Lexer(src, filepath, lex_dot_strings)
    root = ASCIIPlistParser(lexer, filepath).parse()
    if isinstance(root.value, ASCIIPlistDict) == False:
        raise ParseError(filepath, root.line, root.col, "unexpected string; expected `\"key\" = \"value\";`")

    entries = Entries()
    for key_node, value_node in root.value.items():
        assert isinstance(value_node.value, str), "non-string value in %s" % (filepath)
        entries.append(Entry(key=key_node.value,
                             value=value_node.value,
                             comment=key_node.comment_before.strip(),
                             filepath=filepath,
                             start_line=key_node.line,
                             start_col=key_node.col))
    return entries
