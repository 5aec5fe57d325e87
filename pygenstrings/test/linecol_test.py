#!/usr/bin/env python
# -*- coding: utf-8 -*-

# This software is under a BSD license.  See LICENSE.txt for details.

import numpy as np
from pygenstrings.linecol import LineColer, utf8_char_offsets

def test_line_col():

    lc = LineColer("abc\nabc\n")
    cases = [
        (-1, (0, 0)),
        (0, (1, 1)),
        (1, (1, 2)),
        (2, (1, 3)),
        (3, (2, 0)),
        (4, (2, 1)),
        (7, (3, 0)),
        (8, (0, 0)),
        (100, (0, 0)),
    ]
    for offset, expected in cases:
        assert lc.line_col(offset) == expected, "failed line_col test for offset %d" % (offset)

def test_leading_newline():
    lc = LineColer("\na")
    assert lc.line_col(0) == (2, 0), "failed leading newline test"
    assert lc.line_col(1) == (2, 1), "failed leading newline test"

def test_empty_source():
    lc = LineColer("")
    assert lc.line_col(0) == (0, 0), "failed empty source test"

def test_non_ascii_source():
    # offsets are string offsets, not byte offsets
    lc = LineColer("éé\n\U0001F914x")
    assert lc.line_col(1) == (1, 2), "failed non-ascii test"
    assert lc.line_col(3) == (2, 1), "failed non-ascii test"
    assert lc.line_col(4) == (2, 2), "failed non-ascii test"

def test_utf8_char_offsets():
    data = "aé\U0001F914b".encode("utf-8")
    offsets = utf8_char_offsets(data)
    assert len(offsets) == len(data) + 1, "failed offsets length test"
    # a is 1 byte, e acute is 2 bytes, the emoji is 4 bytes
    assert list(offsets[[0, 1, 3, 7, 8]]) == [0, 1, 2, 3, 4], "failed offsets test"
    assert offsets.dtype == np.int64, "failed offsets dtype test"
