#!/usr/bin/env python
# -*- coding: utf-8 -*-

# This software is under a BSD license.  See LICENSE.txt for details.

import os
import re

import pytest

from pygenstrings.errors import FileError, ParseError, RoutineCallError
from pygenstrings.genstrings import GenstringsContext, find_lprojs, find_source_files, \
     read_file, write_file

INFO_PLIST = """<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE plist PUBLIC "-//Apple//DTD PLIST 1.0//EN" "http://www.apple.com/DTDs/PropertyList-1.0.dtd">
<plist version="1.0">
<dict>
	<key>CFBundleDisplayName</key>
	<string>My App</string>
	<key>CFBundleIdentifier</key>
	<string>com.example.app</string>
	<key>NSCameraUsageDescription</key>
	<string>Scan</string>
</dict>
</plist>
"""

EMPTY_INFO_PLIST = INFO_PLIST.replace("CFBundleDisplayName", "CFBundleName").replace("NSCameraUsageDescription", "NSCameraPortraitEffectEnabled")

VIEW_SWIFT = """import UIKit

class View: UIView {
    func bind() {
        title.text = NSLocalizedString("hello", comment: "Greeting")
        button.title = NSLocalizedString("bye", comment: "Farewell")
    }
}
"""

LEGACY_M = """#import "Legacy.h"

@implementation Legacy
- (NSString *)greeting { return NSLocalizedString(@"hello", @"Greeting"); }
@end
"""

def _write(path, content):
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, bytes):
        path.write_bytes(content)
    else:
        path.write_text(content, encoding="utf-8")

def _make_project(root, info_plist=INFO_PLIST):
    _write(root / "Info.plist", info_plist)
    _write(root / "en.lproj" / "Localizable.strings", "/* old */\n\"hello\" = \"Hello\";\n\"unused\" = \"Unused\";\n")
    _write(root / "ja.lproj" / "Localizable.strings", "/* x */\n\"hello\" = \"こんにちは\";\n\"unused\" = \"u\";\n")
    _write(root / "ja.lproj" / "InfoPlist.strings", "\"NSCameraUsageDescription\" = \"スキャン\";\n\"Stale\" = \"x\";\n")
    (root / "Base.lproj").mkdir()
    _write(root / "Sources" / "View.swift", VIEW_SWIFT)
    _write(root / "Sources" / "Legacy.m", LEGACY_M)
    _write(root / "Sources" / "notes.txt", "NSLocalizedString(\"ignored\", comment: \"\")")
    _write(root / "Pods" / "Lib" / "Lib.swift", "NSLocalizedString(\"pod\", comment: \"Pod\")")

def _context(root, **kwargs):
    kwargs.setdefault("exclude", re.compile("Pods/"))
    return GenstringsContext(str(root), str(root / "Info.plist"), **kwargs)

def _read(path):
    return path.read_text(encoding="utf-8")

def test_find(tmp_path):
    _make_project(tmp_path)
    assert find_lprojs(str(tmp_path)) == [str(tmp_path / "en.lproj"), str(tmp_path / "ja.lproj")], "failed find lprojs test"
    assert find_source_files(str(tmp_path)) == [
        str(tmp_path / "Pods" / "Lib" / "Lib.swift"),
        str(tmp_path / "Sources" / "Legacy.m"),
        str(tmp_path / "Sources" / "View.swift"),
    ], "failed find sources test"
    assert find_source_files(str(tmp_path), re.compile("Pods/")) == [
        str(tmp_path / "Sources" / "Legacy.m"),
        str(tmp_path / "Sources" / "View.swift"),
    ], "failed exclude test"

def test_find_skips_symlinks(tmp_path):
    _write(tmp_path / "a.swift", "")
    os.symlink(str(tmp_path / "a.swift"), str(tmp_path / "b.swift"))
    assert find_source_files(str(tmp_path)) == [str(tmp_path / "a.swift")], "failed symlink test"

def test_genstrings(tmp_path):
    _make_project(tmp_path)
    _context(tmp_path).genstrings()

    assert _read(tmp_path / "en.lproj" / "Localizable.strings") == \
        "/* Farewell */\n\"bye\" = \"Farewell\";\n/* Greeting */\n\"hello\" = \"Hello\";\n", "failed development language test"
    assert _read(tmp_path / "ja.lproj" / "Localizable.strings") == \
        "/* Farewell */\n\"bye\" = \"Farewell\";\n/* Greeting */\n\"hello\" = \"こんにちは\";\n", "failed translation test"

    assert _read(tmp_path / "en.lproj" / "InfoPlist.strings") == \
        "\"CFBundleDisplayName\" = \"My App\";\n\"NSCameraUsageDescription\" = \"Scan\";\n", "failed development InfoPlist.strings test"
    assert _read(tmp_path / "ja.lproj" / "InfoPlist.strings") == \
        "\"CFBundleDisplayName\" = \"My App\";\n\"NSCameraUsageDescription\" = \"スキャン\";\n", "failed translated InfoPlist.strings test"

    assert os.listdir(str(tmp_path / "Base.lproj")) == [], "failed Base.lproj test"

def test_genstrings_twice_is_stable(tmp_path):
    _make_project(tmp_path)
    _context(tmp_path).genstrings()
    first = [_read(tmp_path / lproj / name) for lproj in ("en.lproj", "ja.lproj") for name in ("Localizable.strings", "InfoPlist.strings")]
    _context(tmp_path).genstrings()
    second = [_read(tmp_path / lproj / name) for lproj in ("en.lproj", "ja.lproj") for name in ("Localizable.strings", "InfoPlist.strings")]
    assert first == second, "failed second run test"

def test_empty_info_plist_strings_are_removed(tmp_path):
    _make_project(tmp_path, EMPTY_INFO_PLIST)
    _context(tmp_path).genstrings()
    assert os.path.exists(str(tmp_path / "ja.lproj" / "InfoPlist.strings")) == False, "failed removal test"
    assert os.path.exists(str(tmp_path / "en.lproj" / "InfoPlist.strings")) == False, "failed no file test"
    assert os.path.exists(str(tmp_path / "ja.lproj" / "Localizable.strings")), "failed Localizable.strings kept test"

def test_missing_development_language(tmp_path):
    _make_project(tmp_path)
    with pytest.raises(FileError) as info:
        _context(tmp_path, devlang="fr").genstrings()
    assert str(info.value) == "%s: directory not found" % (os.path.join(str(tmp_path), "fr.lproj")), "failed missing lproj test"

def test_missing_info_plist(tmp_path):
    _make_project(tmp_path)
    os.remove(str(tmp_path / "Info.plist"))
    with pytest.raises(FileError) as info:
        _context(tmp_path).genstrings()
    assert info.value.message == "file not found", "failed missing Info.plist test"

def test_conflicting_comments_write_nothing(tmp_path):
    _make_project(tmp_path)
    _write(tmp_path / "Sources" / "Legacy.m", LEGACY_M.replace("@\"Greeting\"", "@\"Salutation\""))
    before = _read(tmp_path / "en.lproj" / "Localizable.strings")
    with pytest.raises(RoutineCallError) as info:
        _context(tmp_path).genstrings()
    assert "routine call `hello` has different comment" in str(info.value), "failed conflict test"
    assert _read(tmp_path / "en.lproj" / "Localizable.strings") == before, "failed nothing written test"

def test_duplicated_key_in_strings_file(tmp_path):
    _make_project(tmp_path)
    path = tmp_path / "ja.lproj" / "Localizable.strings"
    _write(path, "\"a\" = \"1\";\n\"a\" = \"2\";\n")
    with pytest.raises(ParseError) as info:
        _context(tmp_path).genstrings()
    assert str(info.value) == "%s:2:1: duplicated key `a`" % (path), "failed duplicated key test"

def test_exclude_as_string(tmp_path):
    _make_project(tmp_path)
    ctx = GenstringsContext(str(tmp_path), str(tmp_path / "Info.plist"), exclude="Pods/")
    ctx.find()
    assert all("Pods" not in path for path in ctx.source_file_paths), "failed string exclude test"

def test_read_file(tmp_path):
    path = tmp_path / "a.strings"
    _write(path, "\ufeff\"k\" = \"v\";".encode("utf-8"))
    assert read_file(str(path)) == "\"k\" = \"v\";", "failed byte order mark test"

    _write(path, "\"k\" = \"v\";".encode("utf-16"))
    with pytest.raises(FileError) as info:
        read_file(str(path))
    assert str(info.value) == "%s: is not UTF-8 encoded" % (path), "failed encoding test"

def test_write_file(tmp_path):
    path = tmp_path / "out.strings"
    write_file(str(path), "\"k\" = \"é\";\n")
    assert path.read_bytes() == "\"k\" = \"é\";\n".encode("utf-8"), "failed write test"
    write_file(str(path), "")
    assert path.read_bytes() == b"", "failed overwrite test"
    assert os.listdir(str(tmp_path)) == ["out.strings"], "failed temporary file cleanup test"
