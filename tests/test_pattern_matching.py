#!/usr/bin/env python3
"""
Tests for ordered pattern evaluation, pattern validation and ignore file parsing
"""

from pathlib import Path
import sys

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from confignore.ignore import (
    PatternMatcher,
    evaluate_patterns,
    load_ignore_file,
    match_file_against_patterns,
    parse_ignore_lines,
    validate_ai_ignore_pattern,
)
from confignore.paths import normalize_path


class TestPatternMatcher:
    """Last matching pattern wins, '!' negates"""

    @pytest.fixture
    def matcher(self):
        return PatternMatcher()

    def test_simple_match(self, matcher):
        result = matcher.evaluate("app.log", ["*.log"])
        assert result.ignored
        assert result.matched_patterns == ["*.log"]

    def test_no_match(self, matcher):
        result = matcher.evaluate("src/main.py", ["*.log", "dist/"])
        assert not result.ignored
        assert result.matched_patterns == []

    def test_negation_reincludes(self, matcher):
        patterns = ["*.log", "!keep.log"]
        assert matcher.evaluate("debug.log", patterns).ignored

        result = matcher.evaluate("keep.log", patterns)
        assert not result.ignored
        assert result.matched_patterns == ["*.log", "!keep.log"]

    def test_last_match_wins(self, matcher):
        # Re-exclusion after a negation
        patterns = ["*.log", "!keep.log", "keep.log"]
        assert matcher.evaluate("keep.log", patterns).ignored

    def test_negation_without_prior_match(self, matcher):
        assert not matcher.evaluate("keep.log", ["!keep.log"]).ignored

    def test_empty_patterns_skipped(self, matcher):
        result = matcher.evaluate("a.txt", ["", "   ", "a.txt"])
        assert result.ignored
        assert result.matched_patterns == ["a.txt"]

    def test_patterns_are_trimmed(self, matcher):
        result = matcher.evaluate("secret.key", ["  *.key  "])
        assert result.ignored
        assert result.matched_patterns == ["*.key"]

    def test_directory_patterns(self, matcher):
        assert matcher.evaluate("secrets/token.txt", ["secrets/**"]).ignored
        assert matcher.evaluate("secrets/nested/deep.txt", ["secrets/**"]).ignored
        assert matcher.evaluate("build/out.js", ["build/"]).ignored
        assert not matcher.evaluate("src/build.js", ["build/"]).ignored

    def test_path_normalization(self, matcher):
        assert matcher.evaluate("./secrets/token.txt", ["secrets/**"]).ignored
        assert matcher.evaluate("secrets\\token.txt", ["./secrets/**"]).ignored

    def test_module_helpers(self):
        assert evaluate_patterns("x.tmp", ["*.tmp"]).ignored
        assert match_file_against_patterns("x.tmp", ["*.tmp"])
        assert not match_file_against_patterns("x.txt", ["*.tmp"])


class TestNormalizePath:

    def test_backslashes(self):
        assert normalize_path("a\\b\\c") == "a/b/c"

    def test_strips_one_leading_dot_slash(self):
        assert normalize_path("./a/b") == "a/b"
        assert normalize_path("././a") == "./a"

    def test_leaves_other_paths(self):
        assert normalize_path("../a") == "../a"
        assert normalize_path("a/b") == "a/b"


class TestPatternValidator:

    def test_valid_pattern(self):
        result = validate_ai_ignore_pattern("  secrets/**  ")
        assert result.valid
        assert result.pattern == "secrets/**"
        assert result.errors is None

    def test_valid_negation(self):
        assert validate_ai_ignore_pattern("!keep.env").valid

    def test_empty_pattern(self):
        result = validate_ai_ignore_pattern("   ")
        assert not result.valid
        assert result.pattern == ""
        assert result.errors == ["Pattern is empty"]

    def test_bare_negation(self):
        result = validate_ai_ignore_pattern("!")
        assert not result.valid
        assert result.errors == ["Negation pattern must include a rule"]

    def test_unparseable_pattern(self):
        result = validate_ai_ignore_pattern("src\\")
        assert not result.valid
        assert result.pattern == "src\\"
        assert result.errors and result.errors[0]


class TestIgnoreFileParsing:

    def test_skips_comments_and_blanks(self):
        info = parse_ignore_lines("# secrets\n\n*.env\n  dist/  \n#*.log\n")
        assert info.patterns == ["*.env", "dist/"]
        assert info.stats["comment_lines"] == 2
        assert info.stats["empty_lines"] == 1
        assert info.stats["pattern_lines"] == 2
        assert info.is_valid

    def test_keeps_negations(self):
        info = parse_ignore_lines("*.log\n!keep.log\n")
        assert info.patterns == ["*.log", "!keep.log"]

    @pytest.mark.asyncio
    async def test_load_file(self, tmp_path):
        ignore_file = tmp_path / ".gitignore"
        ignore_file.write_text("node_modules/\n# comment\n*.pyc\n")

        info = await load_ignore_file(ignore_file)
        assert info.path == ignore_file
        assert info.patterns == ["node_modules/", "*.pyc"]
        assert info.is_valid

    @pytest.mark.asyncio
    async def test_unreadable_file_records_error(self, tmp_path):
        ignore_file = tmp_path / ".aiexclude"
        ignore_file.write_bytes(b"\xff\xfe\xfa\n")

        info = await load_ignore_file(ignore_file)
        assert info.patterns == []
        assert not info.is_valid
        assert info.errors[0].startswith("Error reading file:")

    @pytest.mark.asyncio
    async def test_missing_file_records_error(self, tmp_path):
        info = await load_ignore_file(tmp_path / "missing")
        assert info.patterns == []
        assert len(info.errors) == 1
