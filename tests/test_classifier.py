"""Tests for the binary architecture classifier."""

import pytest

from siliconscan.classifier import (
    BinaryLookup,
    arch_from_name,
    classify,
    classify_path,
    parse_descriptor,
    parse_major,
)
from siliconscan.config import RuleTables
from siliconscan.models import Architecture
from siliconscan.scanner.static import StaticProbe

NATIVE = "/opt/homebrew/bin/jq: Mach-O 64-bit executable arm64"
FOREIGN = "/usr/local/bin/jq: Mach-O 64-bit executable x86_64"
UNIVERSAL_BOTH = (
    "/usr/bin/git: Mach-O universal binary with 2 architectures: "
    "[x86_64:Mach-O 64-bit executable x86_64] [arm64e:Mach-O 64-bit executable arm64e]"
)
UNIVERSAL_FOREIGN = (
    "/usr/local/bin/old: Mach-O universal binary with 2 architectures: "
    "[x86_64:Mach-O 64-bit executable x86_64] [i386:Mach-O executable i386]"
)


def test_classify_thin_native():
    assert classify(NATIVE) is Architecture.NATIVE


def test_classify_thin_foreign():
    assert classify(FOREIGN) is Architecture.FOREIGN


def test_classify_universal_with_native_slice():
    assert classify(UNIVERSAL_BOTH) is Architecture.UNIVERSAL_NATIVE


def test_classify_universal_foreign_only():
    assert classify(UNIVERSAL_FOREIGN) is Architecture.UNIVERSAL_FOREIGN_ONLY


def test_classify_universal_without_bracketed_slices():
    """Slice names outside brackets are still picked up."""
    text = "Mach-O universal binary with 2 architectures: x86_64 arm64"
    assert classify(text) is Architecture.UNIVERSAL_NATIVE


@pytest.mark.parametrize("text", [None, "", "ASCII text", "ELF 64-bit LSB executable, x86-64", "POSIX shell script"])
def test_classify_unrecognized_is_unknown(text):
    assert classify(text) is Architecture.UNKNOWN


def test_classify_is_pure():
    """Same descriptor text, same verdict."""
    assert {classify(UNIVERSAL_BOTH) for _ in range(5)} == {Architecture.UNIVERSAL_NATIVE}


def test_parse_descriptor_kinds():
    assert parse_descriptor(NATIVE).kind == "thin"
    assert parse_descriptor(UNIVERSAL_BOTH).arches == ("x86_64", "arm64e")
    assert parse_descriptor("data").kind == "other"


def test_classify_path_missing_file():
    """A path that does not exist is UNKNOWN / NOT_FOUND."""
    probe = StaticProbe({})
    result = classify_path(probe, "/nope/bin/tool")
    assert result.architecture is Architecture.UNKNOWN
    assert result.lookup is BinaryLookup.NOT_FOUND


def test_classify_path_unrecognized_format():
    """An existing file with an unknown descriptor is UNKNOWN / UNRECOGNIZED."""
    probe = StaticProbe({"files": ["/usr/local/bin/script"], "binaries": {}})
    result = classify_path(probe, "/usr/local/bin/script")
    assert result.architecture is Architecture.UNKNOWN
    assert result.lookup is BinaryLookup.UNRECOGNIZED


def test_classify_path_found():
    probe = StaticProbe({"binaries": {"/usr/local/bin/jq": FOREIGN}})
    result = classify_path(probe, "/usr/local/bin/jq")
    assert result.architecture is Architecture.FOREIGN
    assert result.lookup is BinaryLookup.FOUND


def test_classify_path_none():
    assert classify_path(StaticProbe({}), None).lookup is BinaryLookup.NOT_FOUND


@pytest.mark.parametrize("name,expected", [
    ("arm64", Architecture.NATIVE),
    ("aarch64", Architecture.NATIVE),
    ("x86_64", Architecture.FOREIGN),
    ("amd64", Architecture.FOREIGN),
    ("linux/amd64", Architecture.FOREIGN),
    ("linux/arm64/v8", Architecture.NATIVE),
    ("linux/amd64/v2", Architecture.FOREIGN),
    ("linux/amd64/v3", Architecture.FOREIGN),
    ("linux/", Architecture.UNKNOWN),
    ("", Architecture.UNKNOWN),
    (None, Architecture.UNKNOWN),
    ("foreign", Architecture.UNKNOWN),
])
def test_arch_from_name(name, expected):
    assert arch_from_name(name) is expected


def test_arch_from_name_respects_tables():
    """Swapping the families in the tables swaps the verdict."""
    tables = RuleTables(
        native_arch="x86_64",
        foreign_arch="arm64",
        native_aliases=frozenset({"x86_64", "amd64"}),
        foreign_aliases=frozenset({"arm64", "aarch64"}),
    )
    assert arch_from_name("amd64", tables) is Architecture.NATIVE
    assert classify(NATIVE, tables) is Architecture.FOREIGN


@pytest.mark.parametrize("version,expected", [
    ("12.2.1", 12),
    ("10.15.7", 10),
    ("Xcode 11.7", 11),
    ("v16.14.0", 16),
    ("", None),
    (None, None),
    ("unknown", None),
])
def test_parse_major(version, expected):
    assert parse_major(version) == expected


def test_architecture_labels():
    assert Architecture.UNIVERSAL_NATIVE.label() == "universal (includes arm64)"
    assert Architecture.UNIVERSAL_FOREIGN_ONLY.label() == "universal (x86_64 only)"
    assert Architecture.FOREIGN.runs_emulated
    assert not Architecture.UNIVERSAL_NATIVE.runs_emulated
