#!/usr/bin/env python
# -*- coding: utf-8 -*-

# This software is under a BSD license.  See LICENSE.txt for details.

"""Parser for old-style (ASCII, NeXTSTEP) property lists.

    value  := string | data | array | dict
    dict   := '{' (string '=' value ';')* '}'
    array  := '(' (value (',' value)*)? ')'
    data   := '<' hex-run* '>'
    string := quoted-string | bare-string

At the top level an empty document is an empty dict, a run of
"key = value;" pairs without braces is a dict, and a single string is a
string.

Block comments are kept.  A comment immediately before a token that starts
a value becomes that node's comment_before; a comment right after a node
that does not itself precede another value becomes its comment_after.
That is how .strings files keep the comment written above each entry.

"""

__all__ = ["ASCIIPlistNode", "ASCIIPlistDict", "ASCIIPlistParser",
           "lex_ascii_plist", "parse_ascii_plist"]

from collections import namedtuple
from pygenstrings.errors import ParseError
from pygenstrings.escapes import decode_plist_escape
from pygenstrings.lexer import Lexer, TokenStream, PUNCTUATION, is_space, \
     lex_comment, lex_spaces, lex_quoted_string, kind_name, \
     EOF, ERROR, COMMENT, SPACES, STRING, BARE_STRING, EQUAL_SIGN, SEMICOLON, \
     COMMA, PAREN_LEFT, PAREN_RIGHT, BRACE_LEFT, BRACE_RIGHT, \
     LESS_THAN_SIGN, GREATER_THAN_SIGN

# Characters allowed in an unquoted string.  This is the set accepted by
# the system plist tools, which is wider than what they document; keep it
# exactly as is so that files they write keep parsing.
_BARE_STRING_CHARS = frozenset("ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789$_.:/-")
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_ASCII_PLIST_PUNCTUATION = "=;,(){}<>"

# tokens a comment_before can attach to
_VALUE_START = (STRING, BARE_STRING, BRACE_LEFT, LESS_THAN_SIGN, PAREN_LEFT)

def lex_bare_string(state):
    def lex(l):
        while l.next() in _BARE_STRING_CHARS:
            pass
        l.backup()
        l.emit(BARE_STRING)
        return state
    return lex

def lex_ascii_plist(l):
    if l.has_prefix("/*"):
        return lex_comment(lex_ascii_plist)
    c = l.next()
    if c is None:
        return l.eof()
    if c == "\"":
        l.backup()
        return lex_quoted_string(decode_plist_escape, lex_ascii_plist, multiline=True)
    if c in _ASCII_PLIST_PUNCTUATION:
        l.emit(PUNCTUATION[c])
        return lex_ascii_plist
    if is_space(c):
        l.backup()
        return lex_spaces(lex_ascii_plist)
    if c in _BARE_STRING_CHARS:
        l.backup()
        return lex_bare_string(lex_ascii_plist)
    return l.unexpected_character(c)

class ASCIIPlistNode(object):
    """A value in an ASCII property list.

    value is one of

        str              "string" or bare-string
        bytes            <0fbd777f>
        list             ( ... ), a list of ASCIIPlistNode
        ASCIIPlistDict   { ... }

    line and col are the position of the token that starts the value.
    comment_before and comment_after hold the text of adjacent block
    comments, without the /* */ delimiters, or "" if there are none.

    """

    def __init__(self, value=None, line=0, col=0, comment_before="", comment_after=""):
        super(ASCIIPlistNode, self).__init__()
        self.value = value
        self.line = line
        self.col = col
        self.comment_before = comment_before
        self.comment_after = comment_after

    def flatten(self):
        """Plain Python value: str, bytes, list or dict"""
        if isinstance(self.value, (str, bytes)):
            return self.value
        if isinstance(self.value, list):
            return [node.flatten() for node in self.value]
        if isinstance(self.value, ASCIIPlistDict):
            return dict((key, node.flatten()) for key, node in self.value.iteritems())
        assert False, "unhandled node value %r" % (self.value)

    def __repr__(self):
        return "ASCIIPlistNode(%r, line=%d, col=%d)" % (self.value, self.line, self.col)

class ASCIIPlistDict(object):
    """Dictionary that keeps key order and the key nodes themselves.

    Indexing by key string returns the value node; key_nodes holds the
    nodes of the keys (with their comments) in document order.

    """

    def __init__(self):
        super(ASCIIPlistDict, self).__init__()
        self.key_nodes = []
        self._values = {}

    def add(self, key_node, value_node):
        assert key_node.value not in self._values, "duplicate key %s" % (key_node.value)
        self.key_nodes.append(key_node)
        self._values[key_node.value] = value_node

    def __contains__(self, key):
        return key in self._values

    def __getitem__(self, key):
        return self._values[key]

    def __len__(self):
        return len(self.key_nodes)

    def __iter__(self):
        return (node.value for node in self.key_nodes)

    def items(self):
        """(key node, value node) pairs in document order"""
        return [(node, self._values[node.value]) for node in self.key_nodes]

    def iteritems(self):
        """(key string, value node) pairs in document order"""
        for node in self.key_nodes:
            yield node.value, self._values[node.value]

    def __repr__(self):
        return "ASCIIPlistDict(%r)" % (list(self.iteritems()))

class _AnnotatedToken(namedtuple("_AnnotatedToken", "token comment")):
    """A token together with the comment token right before it, if any"""
    __slots__ = ()

    def comment_text(self):
        return "" if self.comment is None else self.comment.value

    def can_have_comment_before(self):
        return self.comment is not None and self.token.kind in _VALUE_START

class ASCIIPlistParser(object):
    """Recursive descent parser over a lexer producing ASCII plist tokens.

    The lexer grammar is up to the caller: parse_ascii_plist uses the full
    ASCII plist grammar, while .strings files use a smaller one without
    bare strings, arrays or data.

    """

    def __init__(self, lexer, filepath):
        super(ASCIIPlistParser, self).__init__()
        self.filepath = filepath
        self._tokens = TokenStream(lambda: _AnnotatedToken(lexer.next_token(), None), depth=2)

    def _next_non_space(self):
        comment = None
        while True:
            item = self._tokens.next()
            kind = item.token.kind
            if kind == SPACES:
                continue
            if kind == COMMENT:
                # only the nearest comment is kept
                comment = item.token
                continue
            if comment is not None:
                item = item._replace(comment=comment)
            return item

    def _peek_non_space(self):
        item = self._next_non_space()
        self._tokens.backup(item)
        return item

    def _comment_after(self):
        following = self._peek_non_space()
        if following.can_have_comment_before():
            return ""
        return following.comment_text()

    def _error(self, token, message):
        return ParseError(self.filepath, token.start_line, token.start_col, message)

    def _unexpected(self, item, expected=None):
        token = item.token
        if token.kind == ERROR:
            raise token.error
        message = "unexpected %s" % (token.describe())
        if expected is not None:
            message += "; expected %s" % (expected)
        raise self._error(token, message)

    def _expect(self, kind):
        item = self._next_non_space()
        if item.token.kind != kind:
            self._unexpected(item, kind_name(kind))
        return item

    def _parse_value(self):
        item = self._next_non_space()
        kind = item.token.kind
        if kind in (STRING, BARE_STRING):
            self._tokens.backup(item)
            return self._parse_string()
        if kind == BRACE_LEFT:
            return self._parse_dict(item, BRACE_RIGHT)
        if kind == LESS_THAN_SIGN:
            return self._parse_data(item)
        if kind == PAREN_LEFT:
            return self._parse_array(item)
        self._unexpected(item, "value")

    def _parse_string(self):
        item = self._next_non_space()
        token = item.token
        if token.kind not in (STRING, BARE_STRING):
            self._unexpected(item, "string")
        node = ASCIIPlistNode(token.value, token.start_line, token.start_col, item.comment_text())
        node.comment_after = self._comment_after()
        return node

    def _parse_dict(self, start, terminator):
        node = ASCIIPlistNode(None, start.token.start_line, start.token.start_col, start.comment_text())
        out = ASCIIPlistDict()
        while True:
            item = self._next_non_space()
            if item.token.kind == terminator:
                break
            self._tokens.backup(item)
            key = self._parse_string()
            self._expect(EQUAL_SIGN)
            value = self._parse_value()
            self._expect(SEMICOLON)
            if key.value in out:
                raise ParseError(self.filepath, key.line, key.col, "duplicated key `%s`" % (key.value))
            out.add(key, value)
        node.value = out
        node.comment_after = self._comment_after()
        return node

    def _parse_array(self, start):
        node = ASCIIPlistNode(None, start.token.start_line, start.token.start_col, start.comment_text())
        out = []
        while True:
            item = self._next_non_space()
            if item.token.kind == PAREN_RIGHT:
                break
            self._tokens.backup(item)
            if len(out):
                self._expect(COMMA)
            out.append(self._parse_value())
        node.value = out
        node.comment_after = self._comment_after()
        return node

    def _parse_data(self, start):
        node = ASCIIPlistNode(None, start.token.start_line, start.token.start_col, start.comment_text())
        digits = []
        while True:
            item = self._next_non_space()
            token = item.token
            if token.kind == GREATER_THAN_SIGN:
                break
            if token.kind != BARE_STRING:
                self._unexpected(item, "hex digits or `>`")
            if any(c not in _HEX_DIGITS for c in token.value):
                raise self._error(token, "malformed hex data `%s`" % (token.value))
            digits.append(token.value)

        hex_string = "".join(digits)
        if len(hex_string) % 2:
            raise self._error(start.token, "malformed hex data: odd number of hex digits")
        node.value = bytes.fromhex(hex_string)
        node.comment_after = self._comment_after()
        return node

    def _parse_root(self, item):
        kind = item.token.kind
        if kind == EOF:
            self._tokens.backup(item)
            out = self._parse_dict(item, EOF)
        elif kind in (STRING, BARE_STRING):
            # one token of lookahead tells a lone string from "key = value;"
            following = self._next_non_space()
            if following.token.kind == EOF:
                self._tokens.backup2(item, following)
                out = self._parse_string()
            elif following.token.kind == EQUAL_SIGN:
                self._tokens.backup2(item, following)
                out = self._parse_dict(item, EOF)
            else:
                self._unexpected(following, "`=` or EOF")
        else:
            self._tokens.backup(item)
            out = self._parse_value()
        self._expect(EOF)
        return out

    def parse(self):
        """Parses a whole document and returns the root ASCIIPlistNode.

        Raises LexError or ParseError on the first problem found.

        """

        item = self._next_non_space()
        try:
            return self._parse_root(item)
        except RecursionError:
            raise self._error(item.token, "nesting too deep")

def parse_ascii_plist(src, filepath=""):
    """Parses an ASCII property list.

    Arguments:
    src -- the document text
    filepath -- used in diagnostics only

    Returns:
    The root ASCIIPlistNode

    """

    lexer = Lexer(src, filepath, lex_ascii_plist)
    return ASCIIPlistParser(lexer, filepath).parse()
