#!/usr/bin/env python
# -*- coding: utf-8 -*-

# This software is under a BSD license.  See LICENSE.txt for details.

"""Line and column lookup for diagnostics.

Every lexer and parser in this package reports positions through a
LineColer built over the complete source text.  Lines are 1-based.  Columns
are measured from the preceding newline, with the start of the buffer
acting as a newline at offset -1, so the first character of the buffer is
column 1 and a newline character is column 0 of the line it opens.

"""

__all__ = ["LineColer", "utf8_char_offsets"]

import numpy as np

def _newline_offsets(src):
    """Offsets of every newline in src, as a sorted numpy array.
    
    Encoding as UTF-32 gives one array element per code point, so the
    indexes returned are string indexes rather than byte offsets.
    
    """
    if len(src) == 0:
        return np.zeros(0, dtype=np.int64)
    code_points = np.frombuffer(src.encode("utf-32-le"), dtype=np.uint32)
    return np.flatnonzero(code_points == 0x0A).astype(np.int64)

def utf8_char_offsets(data):
    """Map byte offsets in UTF-8 data to string offsets.
    
    Arguments:
    data -- UTF-8 encoded bytes
    
    Returns:
    A numpy array of length len(data) + 1; element i is the number of
    characters that start before byte i.
    
    """
    raw = np.frombuffer(data, dtype=np.uint8)
    # continuation bytes are 10xxxxxx
    leading = (raw & 0xC0) != 0x80
    offsets = np.zeros(len(raw) + 1, dtype=np.int64)
    np.cumsum(leading.astype(np.int64), out=offsets[1:])
    return offsets

class LineColer(object):
    """Converts string offsets to (line, col) pairs.
    
    Lookup is a binary search over the precomputed newline offsets.
    
    """
    
    def __init__(self, src):
        super(LineColer, self).__init__()
        self._length = len(src)
        self._line_offsets = np.concatenate((np.array([-1], dtype=np.int64), _newline_offsets(src)))
        
    def line_col(self, offset):
        """Returns (line, col) for offset, or (0, 0) if offset is out of range."""
        
        if offset < 0 or offset >= self._length:
            return 0, 0
        
        line_index = int(np.searchsorted(self._line_offsets, offset, side="right")) - 1
        return line_index + 1, int(offset - self._line_offsets[line_index])
