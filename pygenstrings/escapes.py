#!/usr/bin/env python
# -*- coding: utf-8 -*-

# This software is under a BSD license.  See LICENSE.txt for details.

"""Escape sequence decoders for quoted strings.

Three grammars are supported, one per kind of file we read:

    Swift string literals (.swift)
    C / Objective-C string literals (.m, .h)
    property list strings (.strings, ASCII plists)

Each decoder is called by lex_quoted_string right after the backslash.  It
reads the rest of the escape sequence from the lexer and returns the text it
stands for, or raises EscapeError with the message for the diagnostic.

print_plist_string goes the other way and renders a string as a quoted
property list literal that decode_plist_escape reads back unchanged.

"""

__all__ = ["decode_swift_escape", "decode_objc_escape", "decode_plist_escape",
           "print_plist_string"]

from pygenstrings.lexer import EscapeError

_HEX_DIGITS = "0123456789abcdefABCDEF"
_OCTAL_DIGITS = "01234567"

_SWIFT_ESCAPES = {
    "\\" : "\\",
    "0" : "\0",
    "t" : "\t",
    "r" : "\r",
    "n" : "\n",
    "'" : "'",
    "\"" : "\"",
}

# simple-escape-sequence from the C standard
_C_ESCAPES = {
    "a" : "\a",
    "b" : "\b",
    "f" : "\f",
    "n" : "\n",
    "r" : "\r",
    "t" : "\t",
    "v" : "\v",
    "'" : "'",
    "\"" : "\"",
    "?" : "?",
    "\\" : "\\",
}

# characters below U+00A0 that C allows as universal character names
_UCN_ALLOWED_BELOW_A0 = (0x24, 0x40, 0x60)

def _is_hex(c):
    return c is not None and c in _HEX_DIGITS

def _is_octal(c):
    return c is not None and c in _OCTAL_DIGITS

def _is_surrogate(value):
    return 0xD800 <= value <= 0xDFFF

def _read_digits(l, is_digit, min_count, max_count, message):
    """Reads between min_count and max_count digits from the lexer.

    Stops at the first non-digit without consuming it.  Fewer than
    min_count digits raises EscapeError(message).

    """
    digits = []
    while len(digits) < max_count:
        c = l.next()
        if is_digit(c) == False:
            l.backup()
            break
        digits.append(c)
    if len(digits) < min_count:
        raise EscapeError(message)
    return "".join(digits)

def decode_swift_escape(l):
    """\\\\ \\0 \\t \\r \\n \\' \\" and \\u{1-8 hex digits}"""

    c = l.next()
    if c in _SWIFT_ESCAPES:
        return _SWIFT_ESCAPES[c]

    if c != "u":
        raise EscapeError("invalid escape")

    if l.next() != "{":
        raise EscapeError("invalid unicode escape")
    digits = []
    while True:
        c = l.next()
        if c == "}":
            break
        # a ninth digit is as wrong as a non-digit
        if _is_hex(c) == False or len(digits) == 8:
            raise EscapeError("invalid unicode escape")
        digits.append(c)

    if len(digits) == 0:
        raise EscapeError("invalid unicode escape")
    value = int("".join(digits), 16)
    if _is_surrogate(value) or value > 0x10FFFF:
        raise EscapeError("invalid unicode escape")
    return chr(value)

def _universal_character_name(digits):
    value = int(digits, 16)
    if _is_surrogate(value) or value > 0x10FFFF:
        raise EscapeError("invalid universal character name")
    if value < 0xA0 and value not in _UCN_ALLOWED_BELOW_A0:
        raise EscapeError("invalid universal character name")
    return chr(value)

def decode_objc_escape(l):
    """C escapes: simple escapes, \\uXXXX, \\UXXXXXXXX, \\xH[H] and octal

    Hexadecimal and octal escapes name a single byte; anything above 127
    would need an execution character set to mean something, so it is
    rejected rather than guessed at.

    """

    c = l.next()
    if c in _C_ESCAPES:
        return _C_ESCAPES[c]

    if c == "u":
        return _universal_character_name(_read_digits(l, _is_hex, 4, 4, "invalid universal character name"))
    if c == "U":
        return _universal_character_name(_read_digits(l, _is_hex, 8, 8, "invalid universal character name"))

    if c == "x":
        value = int(_read_digits(l, _is_hex, 1, 2, "invalid escape"), 16)
    elif _is_octal(c):
        l.backup()
        value = int(_read_digits(l, _is_octal, 1, 3, "invalid escape"), 8)
    else:
        raise EscapeError("invalid escape")

    if value > 127:
        raise EscapeError("invalid escape")
    return chr(value)

def decode_plist_escape(l):
    """Property list escapes: C simple escapes, \\U with UTF-16 units, \\NNN

    \\U takes one to four hex digits naming a UTF-16 code unit.  A high
    surrogate must be followed immediately by a second \\U escape with
    exactly four digits holding the low surrogate.

    """

    c = l.next()
    if c in _C_ESCAPES:
        return _C_ESCAPES[c]

    if c == "U":
        unit = int(_read_digits(l, _is_hex, 1, 4, "invalid UTF-16 escape"), 16)
        if 0xDC00 <= unit <= 0xDFFF:
            raise EscapeError("invalid UTF-16 escape")
        if unit < 0xD800 or unit > 0xDBFF:
            return chr(unit)

        if l.next() != "\\" or l.next() != "U":
            raise EscapeError("invalid UTF-16 escape")
        low = int(_read_digits(l, _is_hex, 4, 4, "invalid UTF-16 escape"), 16)
        if low < 0xDC00 or low > 0xDFFF:
            raise EscapeError("invalid UTF-16 escape")
        return chr(0x10000 + ((unit - 0xD800) << 10) + (low - 0xDC00))

    if _is_octal(c):
        l.backup()
        return chr(int(_read_digits(l, _is_octal, 3, 3, "invalid escape"), 8))

    raise EscapeError("invalid escape")

_PRINT_ESCAPES = {
    "\\" : "\\\\",
    "\a" : "\\a",
    "\b" : "\\b",
    "\f" : "\\f",
    "\n" : "\\n",
    "\r" : "\\r",
    "\t" : "\\t",
    "\v" : "\\v",
    "\"" : "\\\"",
}

def print_plist_string(s):
    """Renders s as a double quoted property list string literal.

    Arguments:
    s -- any string of Unicode scalar values

    Returns:
    The quoted literal.  Printable characters are written as they are;
    other characters use \\U escapes, with a surrogate pair for characters
    outside the Basic Multilingual Plane.

    """

    chars = ["\""]
    for c in s:
        if c in _PRINT_ESCAPES:
            chars.append(_PRINT_ESCAPES[c])
        elif c.isprintable():
            chars.append(c)
        else:
            value = ord(c)
            if value < 0x10000:
                chars.append("\\U%04X" % (value))
            else:
                value -= 0x10000
                chars.append("\\U%04X\\U%04X" % (0xD800 + (value >> 10), 0xDC00 + (value & 0x3FF)))
    chars.append("\"")
    return "".join(chars)
