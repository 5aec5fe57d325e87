#!/usr/bin/env python
# -*- coding: utf-8 -*-

# This software is under a BSD license.  See LICENSE.txt for details.

"""State function lexer shared by every grammar in this package.

A lexer is a cursor over an immutable string plus a current state.  A state
is a plain function taking the lexer and returning the next state, or None
once the input is exhausted.  States scan forward from lexer.start and call
emit() to produce a token covering [start, pos).

Tokens are delivered lazily: the run loop steps one state at a time and
hands out whatever that step emitted, so the parser pulls tokens on demand
and scanning never runs ahead by more than a token or two.  The last token
is always EOF or an error token, and the lexer keeps returning it once it
has been reached.

The three grammars (.strings files, ASCII property lists and localization
routine calls) live next to their parsers and are built from the shared
states at the bottom of this module.

"""

__all__ = ["Token", "Lexer", "TokenStream", "PUNCTUATION", "kind_name",
           "is_space", "is_identifier_start", "is_identifier", "lex_comment",
           "lex_spaces", "lex_identifier", "lex_quoted_string", "EscapeError"]

from collections import deque, namedtuple
from pygenstrings.errors import LexError
from pygenstrings.linecol import LineColer

(ERROR, EOF, COMMENT, SPACES, STRING, BARE_STRING, IDENTIFIER, EQUAL_SIGN,
 SEMICOLON, AT_SIGN, COLON, COMMA, PAREN_LEFT, PAREN_RIGHT, BRACE_LEFT,
 BRACE_RIGHT, LESS_THAN_SIGN, GREATER_THAN_SIGN) = range(18)

_KIND_NAMES = {
    ERROR : "error",
    EOF : "EOF",
    COMMENT : "comment",
    SPACES : "spaces",
    STRING : "string",
    BARE_STRING : "bare string",
    IDENTIFIER : "identifier",
    EQUAL_SIGN : "`=`",
    SEMICOLON : "`;`",
    AT_SIGN : "`@`",
    COLON : "`:`",
    COMMA : "`,`",
    PAREN_LEFT : "`(`",
    PAREN_RIGHT : "`)`",
    BRACE_LEFT : "`{`",
    BRACE_RIGHT : "`}`",
    LESS_THAN_SIGN : "`<`",
    GREATER_THAN_SIGN : "`>`",
}

# single character tokens, shared by the grammars that use them
PUNCTUATION = {
    "=" : EQUAL_SIGN,
    ";" : SEMICOLON,
    "@" : AT_SIGN,
    ":" : COLON,
    "," : COMMA,
    "(" : PAREN_LEFT,
    ")" : PAREN_RIGHT,
    "{" : BRACE_LEFT,
    "}" : BRACE_RIGHT,
    "<" : LESS_THAN_SIGN,
    ">" : GREATER_THAN_SIGN,
}

def kind_name(kind):
    """Human readable name of a token kind, for diagnostics"""
    return _KIND_NAMES[kind]

class Token(namedtuple("Token", "kind raw value start end start_line start_col end_line end_col filepath error")):
    """A positioned token.

    raw is the source text the token covers; value is the decoded text
    (unquoted and unescaped for strings, the text between the delimiters
    for comments, otherwise the same as raw).  error is only set on error
    tokens and holds the LexError to raise.

    """
    __slots__ = ()

    def describe(self):
        """Short description used in "unexpected ..." messages"""
        if self.kind in (STRING, BARE_STRING, IDENTIFIER):
            return "%s `%s`" % (kind_name(self.kind), self.value)
        return kind_name(self.kind)

    def __str__(self):
        if self.kind == ERROR:
            return str(self.error)
        if self.kind == EOF:
            return "EOF"
        return "%s from %d:%d to %d:%d" % (self.describe(), self.start_line, self.start_col, self.end_line, self.end_col)

class EscapeError(Exception):
    """Raised by escape decoders; the string state turns it into an error token."""
    pass

class Lexer(object):
    """Cursor over src driven by state functions.

    Arguments:
    src -- the complete input text
    filepath -- used in diagnostics only
    state -- initial state function

    """

    def __init__(self, src, filepath, state):
        super(Lexer, self).__init__()
        self.input = src
        self.filepath = filepath
        self.start = 0
        self.pos = 0
        self._width = 0
        self._line_coler = LineColer(src)
        self._pending = deque()
        self._tokens = self._run(state)
        self._last = None

    def _run(self, state):
        while state is not None:
            state = state(self)
            while len(self._pending):
                yield self._pending.popleft()

    def __iter__(self):
        while True:
            token = self.next_token()
            yield token
            if token.kind in (EOF, ERROR):
                break

    def next_token(self):
        """Returns the next token; repeats the final EOF or error token forever."""
        if self._last is not None and self._last.kind in (EOF, ERROR):
            return self._last
        self._last = next(self._tokens, None)
        assert self._last is not None, "lexer stopped without EOF or error token"
        return self._last

    def next(self):
        """Consumes and returns the next character, or None at end of input"""
        if self.pos >= len(self.input):
            self._width = 0
            return None
        c = self.input[self.pos]
        self.pos += 1
        self._width = 1
        return c

    def backup(self):
        """Steps back over the character returned by the last call to next()"""
        self.pos -= self._width
        self._width = 0

    def peek(self):
        c = self.next()
        self.backup()
        return c

    def ignore(self):
        """Drops the text scanned so far"""
        self.start = self.pos

    def has_prefix(self, prefix):
        return self.input.startswith(prefix, self.pos)

    def _make_token(self, kind, value, error=None):
        start_line, start_col = self._line_coler.line_col(self.start)
        end_line, end_col = self._line_coler.line_col(self.pos)
        raw = self.input[self.start:self.pos]
        return Token(kind, raw, raw if value is None else value, self.start, self.pos,
                     start_line, start_col, end_line, end_col, self.filepath, error)

    def emit(self, kind, value=None):
        self._pending.append(self._make_token(kind, value))
        self.start = self.pos

    def position(self):
        """(line, col) of the token being scanned"""
        return self._line_coler.line_col(self.start)

    def error(self, message):
        """Emits an error token positioned at the start of the current token.

        Returns None so a state can end the lexer with "return l.error(...)".

        """
        line, col = self.position()
        error = LexError(self.filepath, line, col, message)
        self._pending.append(self._make_token(ERROR, "", error))
        self.start = self.pos
        return None

    def unexpected_character(self, c):
        if c is None:
            return self.error("unexpected EOF")
        return self.error("unexpected character `%s`" % (c))

    def eof(self):
        self.emit(EOF, "")
        return None

class TokenStream(object):
    """Pull side of a lexer with bounded push back.

    Arguments:
    pull -- callable returning the next item (usually Lexer.next_token)
    depth -- maximum number of items that can be pushed back

    Pushing back more than depth items is a bug in the parser, not in the
    input, so it fails an assertion.

    """

    def __init__(self, pull, depth=1):
        super(TokenStream, self).__init__()
        self._pull = pull
        self._depth = depth
        self._pushed = []

    def next(self):
        if len(self._pushed):
            return self._pushed.pop()
        return self._pull()

    def backup(self, item):
        assert len(self._pushed) < self._depth, "token lookahead exceeds %d" % (self._depth)
        self._pushed.append(item)

    def backup2(self, first, second):
        """Pushes back two items; first is returned by the next call to next()"""
        assert self._depth >= 2 and len(self._pushed) == 0, "token lookahead exceeds %d" % (self._depth)
        self._pushed.append(second)
        self._pushed.append(first)

    def peek(self):
        item = self.next()
        self.backup(item)
        return item

#
# States and predicates shared by the grammars
#

def is_space(c):
    return c is not None and c in " \t\r\n"

def is_identifier_start(c):
    # Swift and clang both take non-ASCII letters in identifiers
    return c is not None and (c == "_" or c.isalpha())

def is_identifier(c):
    return is_identifier_start(c) or (c is not None and c.isdigit())

def lex_comment(state):
    """Scans a /* ... */ block comment; the token value is the text inside"""
    def lex(l):
        assert l.has_prefix("/*"), "comment state entered without /*"
        end = l.input.find("*/", l.pos + 2)
        if end < 0:
            l.pos = len(l.input)
            return l.error("unterminated comment")
        l.pos = end + 2
        l.emit(COMMENT, l.input[l.start + 2:end])
        return state
    return lex

def lex_spaces(state):
    def lex(l):
        while is_space(l.next()):
            pass
        l.backup()
        if l.start < l.pos:
            l.emit(SPACES)
        return state
    return lex

def lex_identifier(state):
    def lex(l):
        while is_identifier(l.next()):
            pass
        l.backup()
        l.emit(IDENTIFIER)
        return state
    return lex

def lex_quoted_string(decode_escape, state, multiline=False):
    """Scans a double quoted string.

    Arguments:
    decode_escape -- called after a backslash; consumes the rest of the
                     escape sequence and returns its text, or raises
                     EscapeError
    state -- state to return to after the closing quote
    multiline -- whether a raw newline may appear before the closing quote

    """
    def lex(l):
        quote = l.next()
        assert quote == "\"", "string state entered without a quote"
        chars = []
        while True:
            c = l.next()
            if c is None or (c == "\n" and multiline == False):
                return l.error("unterminated string literal")
            if c == "\"":
                l.emit(STRING, "".join(chars))
                return state
            if c == "\\":
                try:
                    chars.append(decode_escape(l))
                except EscapeError as e:
                    return l.error(str(e))
            else:
                chars.append(c)
    return lex
