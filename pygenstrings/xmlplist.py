#!/usr/bin/env python
# -*- coding: utf-8 -*-

# This software is under a BSD license.  See LICENSE.txt for details.

"""Strict parser for XML property lists (Info.plist).

plistlib would happily read these files, but it does not say where in the
file a problem is, and it accepts documents Xcode itself would choke on.
Here expat does the XML tokenizing, and every event is recorded with its
offset so that both XML syntax errors and plist grammar errors come out as
"path:line:col: message".

The document must start with exactly

    <?xml version="1.0" encoding="UTF-8"?>
    <!DOCTYPE plist PUBLIC "-//Apple//DTD PLIST 1.0//EN" "http://www.apple.com/DTDs/PropertyList-1.0.dtd">

followed by a <plist> element holding a single value.

"""

__all__ = ["XMLPlistValue", "parse_xml_plist", "XML_HEADER", "PLIST_DOCTYPE"]

import base64
import re
from collections import namedtuple
from datetime import datetime, timedelta, timezone
from xml.parsers import expat

from pygenstrings.errors import ParseError
from pygenstrings.linecol import LineColer, utf8_char_offsets

XML_HEADER = "<?xml version=\"1.0\" encoding=\"UTF-8\"?>"
PLIST_DOCTYPE = "<!DOCTYPE plist PUBLIC \"-//Apple//DTD PLIST 1.0//EN\" \"http://www.apple.com/DTDs/PropertyList-1.0.dtd\">"

ANY_PLIST_VALUE = "one of <string>, <real>, <integer>, <true>, <false>, <date>, <data>, <array>, <dict>"

(_START, _END, _CHARDATA, _COMMENT, _PROCINST, _DIRECTIVE, _EOF, _ERROR) = range(8)

_INTEGER_RE = re.compile(r"[+-]?[0-9]+\Z")
_REAL_RE = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?\Z|[+-]?(inf|infinity|nan)\Z", re.IGNORECASE)
_DATE_RE = re.compile(r"([0-9]{4})-([0-9]{2})-([0-9]{2})T([0-9]{2}):([0-9]{2}):([0-9]{2})(\.[0-9]+)?(Z|[+-][0-9]{2}:[0-9]{2})\Z")

_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1

# elements of the plist grammar itself, never skipped as unknown values
_STRUCTURE_ELEMENTS = ("key", "plist")

class _XMLToken(namedtuple("_XMLToken", "kind name data offset")):
    __slots__ = ()

    def __str__(self):
        if self.kind == _START:
            return "<%s>" % (self.name)
        if self.kind == _END:
            return "</%s>" % (self.name)
        if self.kind == _CHARDATA:
            return "CharData"
        if self.kind == _COMMENT:
            return "Comment"
        if self.kind == _PROCINST:
            return "<?%s?>" % (self.name)
        if self.kind == _DIRECTIVE:
            if len(self.data) >= 20:
                return "<!%s...>" % (self.data[:20])
            return "<!%s>" % (self.data)
        if self.kind == _EOF:
            return "EOF"
        return self.data

    def is_space(self):
        return self.kind == _CHARDATA and len(self.data.strip()) == 0

def _tokenize(src):
    """Runs expat over src and returns the list of _XMLToken.

    The list always ends with an _EOF token, or with an _ERROR token holding
    the expat message if the document is not well formed.  Offsets are
    string offsets into src.

    """

    data = src.encode("utf-8")
    char_offsets = utf8_char_offsets(data)
    events = []
    parser = expat.ParserCreate()

    def char_offset(byte_index):
        byte_index = min(max(byte_index, 0), len(data))
        return int(char_offsets[byte_index])

    def add(kind, name=None, value=""):
        events.append(_XMLToken(kind, name, value, char_offset(parser.CurrentByteIndex)))

    def xml_decl(version, encoding, standalone):
        # only allowed at the very start of the document
        events.append(_XMLToken(_PROCINST, "xml", "", 0))

    def start_doctype(name, system_id, public_id, has_internal_subset):
        # expat reports this once the external id has been read, so look
        # back for the start of the declaration
        offset = char_offset(parser.CurrentByteIndex)
        start = src.rfind("<!DOCTYPE", 0, offset + 1)
        if start >= 0:
            offset = start
        end = src.find(">", offset)
        events.append(_XMLToken(_DIRECTIVE, None, src[offset + 2:end if end >= 0 else len(src)], offset))

    def start_element(name, attributes):
        add(_START, name)

    def end_element(name):
        add(_END, name)

    def character_data(text):
        if len(events) and events[-1].kind == _CHARDATA:
            events[-1] = events[-1]._replace(data=events[-1].data + text)
        else:
            add(_CHARDATA, None, text)

    def comment(text):
        add(_COMMENT, None, text)

    def processing_instruction(target, text):
        add(_PROCINST, target, text)

    parser.XmlDeclHandler = xml_decl
    parser.StartDoctypeDeclHandler = start_doctype
    parser.StartElementHandler = start_element
    parser.EndElementHandler = end_element
    parser.CharacterDataHandler = character_data
    parser.CommentHandler = comment
    parser.ProcessingInstructionHandler = processing_instruction

    try:
        parser.Parse(data, True)
    except expat.ExpatError as e:
        events.append(_XMLToken(_ERROR, None, expat.ErrorString(e.code), char_offset(parser.ErrorByteIndex)))
    else:
        events.append(_XMLToken(_EOF, None, "", len(src)))
    return events

class XMLPlistValue(object):
    """A value in an XML property list.

    value is one of

        str                 <string>
        float               <real>
        int                 <integer>
        bool                <true/>, <false/>
        datetime            <date>, timezone aware, in UTC
        bytes               <data>
        list                <array>, a list of XMLPlistValue
        dict                <dict>, mapping str to XMLPlistValue

    line and col locate the start tag.

    """

    def __init__(self, value, line=0, col=0):
        super(XMLPlistValue, self).__init__()
        self.value = value
        self.line = line
        self.col = col

    def __str__(self):
        # bool before int, since bool is a subclass of int
        if isinstance(self.value, bool):
            return "<true>" if self.value else "<false>"
        if isinstance(self.value, str):
            return "<string>"
        if isinstance(self.value, float):
            return "<real>"
        if isinstance(self.value, int):
            return "<integer>"
        if isinstance(self.value, datetime):
            return "<date>"
        if isinstance(self.value, bytes):
            return "<data>"
        if isinstance(self.value, list):
            return "<array>"
        if isinstance(self.value, dict):
            return "<dict>"
        assert False, "unhandled plist value %r" % (self.value)

    def flatten(self):
        """Plain Python value, the same shape plistlib.loads returns"""
        if isinstance(self.value, list):
            return [v.flatten() for v in self.value]
        if isinstance(self.value, dict):
            return dict((k, v.flatten()) for k, v in self.value.items())
        return self.value

    def __repr__(self):
        return "XMLPlistValue(%r, line=%d, col=%d)" % (self.value, self.line, self.col)

class _XMLPlistParser(object):

    def __init__(self, src, filepath):
        super(_XMLPlistParser, self).__init__()
        self.src = src
        self.filepath = filepath
        self._line_coler = LineColer(src)
        self._tokens = _tokenize(src)
        self._index = 0

    def _position(self, token):
        return self._line_coler.line_col(token.offset)

    def _error(self, token, message):
        line, col = self._position(token)
        return ParseError(self.filepath, line, col, message)

    def _next(self):
        token = self._tokens[self._index]
        # the final EOF or error token repeats
        if self._index < len(self._tokens) - 1:
            self._index += 1
        if token.kind == _ERROR:
            raise self._error(token, token.data)
        return token

    def _next_non_space(self):
        while True:
            token = self._next()
            if token.kind == _COMMENT or token.is_space():
                continue
            return token

    def _unexpected(self, token, expected=None):
        message = "unexpected %s" % (token)
        if expected is not None:
            message += "; expected %s" % (expected)
        raise self._error(token, message)

    def _expect_start(self, name, expected=None):
        token = self._next_non_space()
        if token.kind != _START or (name is not None and token.name != name):
            self._unexpected(token, expected or "<%s>" % (name))
        return token

    def _expect_end(self, name, skip_space=False):
        token = self._next_non_space() if skip_space else self._next()
        if token.kind != _END or token.name != name:
            self._unexpected(token, "</%s>" % (name))
        return token

    def _expect_header(self):
        token = self._next()
        if token.kind != _PROCINST or token.name != "xml" or \
           self.src.startswith(XML_HEADER, token.offset) == False:
            self._unexpected(token, "<?xml?>")

    def _expect_doctype(self):
        token = self._next_non_space()
        if token.kind != _DIRECTIVE or self.src.startswith(PLIST_DOCTYPE, token.offset) == False:
            self._unexpected(token, "<!DOCTYPE>")

    def _parse_text(self, name):
        """Content of a text-only element; "" if it is empty"""
        token = self._next()
        if token.kind == _END and token.name == name:
            return "", token
        if token.kind != _CHARDATA:
            self._unexpected(token, "CharData")
        self._expect_end(name)
        return token.data, token

    def _parse_bool(self, name):
        self._expect_end(name)
        return name == "true"

    def _parse_integer(self):
        text, token = self._parse_text("integer")
        if _INTEGER_RE.match(text) is None:
            raise self._error(token, "invalid integer `%s`" % (text))
        value = int(text)
        if value < _INT64_MIN or value > _INT64_MAX:
            raise self._error(token, "integer `%s` out of range" % (text))
        return value

    def _parse_real(self):
        text, token = self._parse_text("real")
        # float() alone would also take non-ASCII digits and underscores
        if _REAL_RE.match(text) is None:
            raise self._error(token, "invalid real `%s`" % (text))
        return float(text)

    def _parse_date(self):
        text, token = self._parse_text("date")
        match = _DATE_RE.match(text)
        if match is None:
            raise self._error(token, "invalid date `%s`" % (text))
        year, month, day, hour, minute, second = [int(x) for x in match.groups()[:6]]
        fraction, zone = match.group(7), match.group(8)
        microsecond = int((fraction[1:] + "000000")[:6]) if fraction else 0
        if zone == "Z":
            tz = timezone.utc
        else:
            sign = -1 if zone[0] == "-" else 1
            tz = timezone(sign * timedelta(hours=int(zone[1:3]), minutes=int(zone[4:6])))
        try:
            value = datetime(year, month, day, hour, minute, second, microsecond, tzinfo=tz)
        except ValueError:
            raise self._error(token, "invalid date `%s`" % (text))
        return value.astimezone(timezone.utc)

    def _parse_data(self, start):
        chunks = []
        while True:
            token = self._next()
            if token.kind == _END:
                if token.name != "data":
                    self._unexpected(token, "</data>")
                break
            if token.kind != _CHARDATA:
                self._unexpected(token, "CharData or </data>")
            chunks.append(token.data)

        text = "".join(chunks).strip("\r\n\t ").replace("\r", "").replace("\n", "")
        try:
            return base64.b64decode(text.encode("ascii"), validate=True)
        except (ValueError, UnicodeEncodeError):
            raise self._error(start, "illegal base64 data")

    def _parse_array(self):
        out = []
        while True:
            token = self._next_non_space()
            if token.kind == _END:
                if token.name != "array":
                    self._unexpected(token, "</array>")
                return out
            if token.kind != _START:
                self._unexpected(token, ANY_PLIST_VALUE)
            out.append(self._parse_value(token))

    def _skip_element(self, start):
        depth = 1
        while depth > 0:
            token = self._next()
            if token.kind == _START:
                depth += 1
            elif token.kind == _END:
                depth -= 1
            elif token.kind == _EOF:
                self._unexpected(token, "</%s>" % (start.name))

    def _parse_dict(self):
        out = {}
        while True:
            token = self._next_non_space()
            if token.kind == _END:
                if token.name != "dict":
                    self._unexpected(token, "</dict>")
                return out
            if token.kind != _START or token.name != "key":
                self._unexpected(token, "<key>")
            key, _ = self._parse_text("key")
            start = self._expect_start(None, ANY_PLIST_VALUE)
            if start.name in _STRUCTURE_ELEMENTS:
                self._unexpected(start, ANY_PLIST_VALUE)
            if start.name not in _VALUE_PARSERS:
                # unknown value types are dropped along with their key
                self._skip_element(start)
                continue
            value = self._parse_value(start)
            if key in out:
                raise self._error(token, "duplicated key `%s`" % (key))
            out[key] = value

    def _parse_value(self, start):
        if start.name not in _VALUE_PARSERS:
            self._unexpected(start, ANY_PLIST_VALUE)
        line, col = self._position(start)
        return XMLPlistValue(_VALUE_PARSERS[start.name](self, start), line, col)

    def parse(self):
        self._expect_header()
        self._expect_doctype()
        self._expect_start("plist")
        root = self._expect_start(None, ANY_PLIST_VALUE)
        try:
            out = self._parse_value(root)
        except RecursionError:
            raise self._error(root, "nesting too deep")
        self._expect_end("plist", skip_space=True)
        token = self._next_non_space()
        if token.kind != _EOF:
            self._unexpected(token, "EOF")
        return out

_VALUE_PARSERS = {
    "string" : lambda p, start: p._parse_text("string")[0],
    "real" : lambda p, start: p._parse_real(),
    "integer" : lambda p, start: p._parse_integer(),
    "true" : lambda p, start: p._parse_bool("true"),
    "false" : lambda p, start: p._parse_bool("false"),
    "date" : lambda p, start: p._parse_date(),
    "data" : lambda p, start: p._parse_data(start),
    "array" : lambda p, start: p._parse_array(),
    "dict" : lambda p, start: p._parse_dict(),
}

def parse_xml_plist(src, filepath=""):
    """Parses an XML property list.

    Arguments:
    src -- the document text
    filepath -- used in diagnostics only

    Returns:
    The root XMLPlistValue.  Raises ParseError on malformed XML and on
    anything that is not a valid plist.

    """

    return _XMLPlistParser(src, filepath).parse()
