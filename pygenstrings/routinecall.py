#!/usr/bin/env python
# -*- coding: utf-8 -*-

# This software is under a BSD license.  See LICENSE.txt for details.

"""Finding calls to the localization routine in Swift and Objective-C.

The scanner does not understand either language.  It tokenizes just enough
to recognize

    NSLocalizedString("key", comment: "comment")
    NSLocalizedString(@"key", @"comment")

and skips everything else.  Adjacent literals are joined, so
@"first half " @"second half" reads as a single string.  String literals
anywhere in the file are still decoded, with the escape grammar of the
language chosen from the file extension.

"""

__all__ = ["RoutineCall", "RoutineCalls", "RoutineCallParser",
           "lex_routine_call", "parse_routine_calls", "escape_decoder_for_path"]

import os
from pygenstrings.errors import FileError, ParseError, RoutineCallError
from pygenstrings.escapes import decode_swift_escape, decode_objc_escape
from pygenstrings.lexer import Lexer, TokenStream, PUNCTUATION, is_space, \
     is_identifier_start, lex_spaces, lex_identifier, lex_quoted_string, \
     kind_name, EOF, ERROR, SPACES, STRING, IDENTIFIER, AT_SIGN, COLON, COMMA, \
     PAREN_LEFT, PAREN_RIGHT

_ROUTINE_CALL_PUNCTUATION = "@():,"

_ESCAPE_DECODERS = {
    ".swift" : decode_swift_escape,
    ".m" : decode_objc_escape,
    ".h" : decode_objc_escape,
}

class RoutineCall(object):
    """One call site of the localization routine"""

    def __init__(self, key, comment, filepath="", start_line=0, start_col=0):
        super(RoutineCall, self).__init__()
        self.key = key
        self.comment = comment
        self.filepath = filepath
        self.start_line = start_line
        self.start_col = start_col

    def location(self):
        return "%s:%d:%d" % (self.filepath, self.start_line, self.start_col)

    def __eq__(self, other):
        if isinstance(other, RoutineCall) == False:
            return NotImplemented
        return (self.key, self.comment, self.filepath, self.start_line, self.start_col) == \
               (other.key, other.comment, other.filepath, other.start_line, other.start_col)

    def __ne__(self, other):
        result = self.__eq__(other)
        return result if result is NotImplemented else not result

    __hash__ = None

    def __repr__(self):
        return "RoutineCall(%r, %r, at %s)" % (self.key, self.comment, self.location())

class RoutineCalls(list):
    """Routine calls collected from one or more source files"""

    def to_map(self):
        """Dictionary mapping key to the first RoutineCall using it.

        Raises RoutineCallError for a call with an empty key, or for a call
        whose comment differs from an earlier call with the same key.

        """
        out = {}
        for call in self:
            if len(call.key) == 0:
                raise RoutineCallError(call.filepath, call.start_line, call.start_col, "routine call has empty key")
            existing = out.get(call.key)
            if existing is None:
                out[call.key] = call
            elif existing.comment != call.comment:
                raise RoutineCallError(call.filepath, call.start_line, call.start_col,
                                       "routine call `%s` has different comment from %s" % (call.key, existing.location()))
        return out

def lex_routine_call(decode_escape):
    """Lexer state for arbitrary source text.

    Arguments:
    decode_escape -- escape decoder for the string literals of the language

    Characters that cannot start a token of interest are dropped.

    """
    def lex(l):
        while True:
            c = l.next()
            if c is None:
                return l.eof()
            if c == "\"":
                l.backup()
                return lex_quoted_string(decode_escape, lex)
            if c in _ROUTINE_CALL_PUNCTUATION:
                l.emit(PUNCTUATION[c])
                return lex
            if is_space(c):
                l.backup()
                return lex_spaces(lex)
            if is_identifier_start(c):
                return lex_identifier(lex)
            l.ignore()
    return lex

class RoutineCallParser(object):
    """Picks the calls to routine_name out of a routine call token stream"""

    def __init__(self, lexer, routine_name, filepath):
        super(RoutineCallParser, self).__init__()
        self.routine_name = routine_name
        self.filepath = filepath
        self._tokens = TokenStream(lexer.next_token, depth=1)

    def _next_non_space(self):
        token = self._tokens.next()
        while token.kind == SPACES:
            token = self._tokens.next()
        return token

    def _unexpected(self, token, expected):
        if token.kind == ERROR:
            raise token.error
        raise ParseError(self.filepath, token.start_line, token.start_col,
                         "unexpected %s; expected %s" % (token.describe(), expected))

    def _expect(self, kind):
        token = self._next_non_space()
        if token.kind != kind:
            self._unexpected(token, kind_name(kind))
        return token

    def _parse_string(self):
        """A run of "..." literals, or a run of @"..." literals, joined"""
        token = self._next_non_space()
        at_sign = token.kind == AT_SIGN
        if at_sign:
            token = self._expect(STRING)
        elif token.kind != STRING:
            self._unexpected(token, "string")

        parts = [token.value]
        while True:
            token = self._next_non_space()
            if at_sign and token.kind == AT_SIGN:
                parts.append(self._expect(STRING).value)
            elif at_sign == False and token.kind == STRING:
                parts.append(token.value)
            else:
                self._tokens.backup(token)
                break
        return "".join(parts)

    def _parse_label(self):
        # Swift argument label, as in comment: "..."
        token = self._next_non_space()
        if token.kind != IDENTIFIER:
            self._tokens.backup(token)
            return
        self._expect(COLON)

    def parse(self):
        """Returns the RoutineCalls in source order"""
        calls = RoutineCalls()
        while True:
            token = self._next_non_space()
            if token.kind == EOF:
                break
            if token.kind == ERROR:
                raise token.error
            if token.kind != IDENTIFIER or token.value != self.routine_name:
                continue
            self._expect(PAREN_LEFT)
            key = self._parse_string()
            self._expect(COMMA)
            self._parse_label()
            comment = self._parse_string()
            self._expect(PAREN_RIGHT)
            calls.append(RoutineCall(key, comment, self.filepath, token.start_line, token.start_col))
        return calls

def escape_decoder_for_path(filepath):
    """Escape decoder for the language of filepath, by extension.

    Raises FileError for extensions other than .swift, .m and .h.

    """
    ext = os.path.splitext(filepath)[1]
    if ext not in _ESCAPE_DECODERS:
        raise FileError(filepath, "unknown file type")
    return _ESCAPE_DECODERS[ext]

def parse_routine_calls(src, routine_name, filepath):
    """Scans source text for calls to the localization routine.

    Arguments:
    src -- content of a .swift, .m or .h file
    routine_name -- name of the routine, usually NSLocalizedString
    filepath -- selects the string literal grammar; used in diagnostics

    Returns:
    RoutineCalls positioned at the routine name

    """

    decode_escape = escape_decoder_for_path(filepath)
    lexer = Lexer(src, filepath, lex_routine_call(decode_escape))
    return RoutineCallParser(lexer, routine_name, filepath).parse()
