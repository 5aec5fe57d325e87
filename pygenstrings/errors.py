#!/usr/bin/env python
# -*- coding: utf-8 -*-

# This software is under a BSD license.  See LICENSE.txt for details.

"""Exceptions raised by the parsers and the strings synchronizer.

Positioned errors print as "path:line:col: message", the same shape the
compiler uses, so Xcode can link a build log line back to the offending
file.

"""

__all__ = ["GenstringsError", "FileLineColError", "FileError", "LexError", 
           "ParseError", "RoutineCallError"]

class GenstringsError(Exception):
    """Base class for every error this package raises on bad input."""
    
    def diagnostic(self, severity="error"):
        return "%s: %s" % (severity, self)

class FileLineColError(GenstringsError):
    """An error at a known position in a file.
    
    Line and column follow LineColer; (0, 0) means the position is unknown,
    typically an unexpected end of input.
    
    """
    
    def __init__(self, filepath, line, col, message):
        super(FileLineColError, self).__init__(filepath, line, col, message)
        self.filepath = filepath
        self.line = line
        self.col = col
        self.message = message
        
    def __str__(self):
        return "%s:%d:%d: %s" % (self.filepath, self.line, self.col, self.message)
        
    def diagnostic(self, severity="error"):
        return "%s:%d:%d: %s: %s" % (self.filepath, self.line, self.col, severity, self.message)

class FileError(GenstringsError):
    """An error that concerns a whole file."""
    
    def __init__(self, filepath, message):
        super(FileError, self).__init__(filepath, message)
        self.filepath = filepath
        self.message = message
        
    def __str__(self):
        return "%s: %s" % (self.filepath, self.message)
        
    def diagnostic(self, severity="error"):
        return "%s: %s: %s" % (self.filepath, severity, self.message)

class LexError(FileLineColError):
    """Malformed input found while tokenizing."""
    pass
    
class ParseError(FileLineColError):
    """Well-formed tokens in an order the grammar does not allow."""
    pass

class RoutineCallError(FileLineColError):
    """A localization routine call that cannot be turned into an entry."""
    pass
