#!/usr/bin/env python
# -*- coding: utf-8 -*-

# This software is under a BSD license.  See LICENSE.txt for details.

import pytest

from pygenstrings.asciiplist import ASCIIPlistNode, ASCIIPlistDict, parse_ascii_plist
from pygenstrings.errors import LexError, ParseError

NESTED_PLIST = """/* a */{
    /* a */
    version /* a */ = 1 /* a */;
    classes /* a */ = () /* a */;
    data /* a */ = <> /* a */;
    objects /* a */ = {
        john /* a */ = doe /* a */;
        alice /* a */ = (
            {
                name = alice;
            } /* a */,
            <deadbeef> /* a */
        ) /* a */;
    } /* a */;
}/* a */"""

def test_flatten():
    d = ASCIIPlistDict()
    d.add(ASCIIPlistNode("key"), ASCIIPlistNode([]))
    node = ASCIIPlistNode([ASCIIPlistNode("s"), ASCIIPlistNode(b"\x01"), ASCIIPlistNode(d)])
    assert node.flatten() == ["s", b"\x01", {"key" : []}], "failed flatten test"

def test_parse():
    cases = [
        # string
        ("/*a*/ a /*a*/", "a"),
        ("/*a*/ $-_.:/ /*a*/", "$-_.:/"),
        ("/*a*/\"a\"/*a*/", "a"),
        # data
        ("/*a*/<>/*a*/", b""),
        ("/*a*/<00>/*a*/", b"\x00"),
        ("/*a*/<0001>/*a*/", b"\x00\x01"),
        ("<0fbd 777f>", b"\x0f\xbd\x77\x7f"),
        # array
        ("/*a*/(/*a*/)/*a*/", []),
        ("/*a*/(/*a*/1 /*a*/)/*a*/", ["1"]),
        ("/*a*/(/*a*/1 /*a*/,/*a*/2 /*a*/)/*a*/", ["1", "2"]),
        # dict
        ("", {}),
        (" ", {}),
        ("/*a*/", {}),
        ("/*a*/ ", {}),
        (" /*a*/", {}),
        (" /*a*/ ", {}),
        ("/*a*/$-_.:/ /*a*/=/*a*/a /*a*/;/*a*/", {"$-_.:/" : "a"}),
        ("/*a*/{/*a*/\"$-_.:/\"/*a*/=/*a*/\"$-_.:/\"/*a*/;/*a*/}/*a*/", {"$-_.:/" : "$-_.:/"}),
        ("{}", {}),
        # nested
        (NESTED_PLIST, {
            "version" : "1",
            "classes" : [],
            "data" : b"",
            "objects" : {
                "john" : "doe",
                "alice" : [{"name" : "alice"}, b"\xde\xad\xbe\xef"],
            },
        }),
    ]
    for src, expected in cases:
        assert parse_ascii_plist(src).flatten() == expected, "failed parse test for %r" % (src)

def test_key_order():
    root = parse_ascii_plist("b = 1; a = 2; c = 3;")
    assert list(root.value) == ["b", "a", "c"], "failed key order test"
    assert len(root.value) == 3, "failed dict length test"
    assert "a" in root.value and "z" not in root.value, "failed dict membership test"

def test_positions():
    root = parse_ascii_plist("{\n  key = (\n    value\n  );\n}")
    assert (root.line, root.col) == (1, 1), "failed root position test"
    key_node, value_node = root.value.items()[0]
    assert (key_node.line, key_node.col) == (2, 3), "failed key position test"
    assert (value_node.line, value_node.col) == (2, 9), "failed array position test"
    element = value_node.value[0]
    assert (element.line, element.col) == (3, 5), "failed element position test"

def test_comments():
    root = parse_ascii_plist("/* before */ { /* k */ key = /* v */ value /* after */; other = x; }")
    assert root.comment_before == " before ", "failed root comment test"
    (key_node, value_node), (other_node, _) = root.value.items()
    assert key_node.comment_before == " k ", "failed key comment test"
    assert key_node.comment_after == "", "failed key comment after test"
    assert value_node.comment_before == " v ", "failed value comment test"
    assert value_node.comment_after == " after ", "failed value comment after test"
    assert other_node.comment_before == "", "failed uncommented key test"

def test_nearest_comment_wins():
    root = parse_ascii_plist("/* first */ /* second */ key = value;")
    key_node = root.value.key_nodes[0]
    assert key_node.comment_before == " second ", "failed nearest comment test"

def test_comment_before_value_is_not_comment_after():
    root = parse_ascii_plist("(a, /* b */ b)")
    first, second = root.value
    assert first.comment_after == "", "failed comment attachment test"
    assert second.comment_before == " b ", "failed comment attachment test"

def _parse_error(src, filepath=""):
    with pytest.raises((LexError, ParseError)) as info:
        parse_ascii_plist(src, filepath)
    return str(info.value)

def test_invalid():
    cases = [
        ("a=b;a=c;", ":1:5: duplicated key `a`"),
        ("{", ":0:0: unexpected EOF; expected string"),
        ("a b", ":1:3: unexpected bare string `b`; expected `=` or EOF"),
        ("(1 2)", ":1:4: unexpected bare string `2`; expected `,`"),
        ("<0>", ":1:1: malformed hex data: odd number of hex digits"),
        ("<zz>", ":1:2: malformed hex data `zz`"),
        ("#", ":1:1: unexpected character `#`"),
        ("\"a\" = \"b\"", ":0:0: unexpected EOF; expected `;`"),
        ("a = ;", ":1:5: unexpected `;`; expected value"),
        ("(a) b", ":1:5: unexpected bare string `b`; expected EOF"),
        ("/* open", ":1:1: unterminated comment"),
        ("\"open", ":1:1: unterminated string literal"),
    ]
    for src, message in cases:
        assert _parse_error(src) == message, "failed invalid test for %r" % (src)

def test_error_has_filepath():
    assert _parse_error("a=b;a=c;", "x.plist") == "x.plist:1:5: duplicated key `a`", "failed filepath test"

def test_deep_nesting():
    node = parse_ascii_plist("(" * 50 + ")" * 50)
    for i in range(49):
        node = node.value[0]
    assert node.value == [], "failed nesting test"

    assert _parse_error("(" * 5000 + ")" * 5000, "x.plist") == "x.plist:1:1: nesting too deep", "failed nesting too deep test"
    assert _parse_error("a = " + "{b = " * 5000 + "c" + "; }" * 5000 + ";") == ":1:1: nesting too deep", "failed nested dict test"
