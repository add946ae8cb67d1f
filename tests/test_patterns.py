"""
Unit tests for sftp_shell.patterns module.

Tests cover:
- Glob matching against the parent directory listing
- Directories returned as-is without globbing
- PatternError for patterns with no matches
- preserve_root echoing the user's prefix
- Pattern order and mixing of matches and errors
"""

from sftp_shell.metadata import PatternError
from sftp_shell.patterns import expand_patterns


class TestExpandPatterns:
    """Tests for expand_patterns."""

    def test_star_matches_in_listing_order(self, cache):
        assert expand_patterns(cache, ["/d/*.txt"], "/") == ["/d/a.txt", "/d/b.txt"]

    def test_no_match_is_pattern_error(self, cache):
        assert expand_patterns(cache, ["/d/*.zzz"], "/") == [PatternError("/d/*.zzz")]

    def test_question_mark_and_brackets(self, cache):
        assert expand_patterns(cache, ["/d/?.md"], "/") == ["/d/c.md"]
        assert expand_patterns(cache, ["/d/[ab].txt"], "/") == ["/d/a.txt", "/d/b.txt"]

    def test_brackets_in_directory_name_are_literal(self, cache, remote_tree):
        remote_tree["/[x]"] = True
        remote_tree["/[x]/a.txt"] = False

        assert expand_patterns(cache, ["a.txt"], "/[x]") == ["/[x]/a.txt"]
        assert expand_patterns(cache, ["/[x]/*.txt"], "/") == ["/[x]/a.txt"]

    def test_relative_pattern(self, cache):
        assert expand_patterns(cache, ["*.md"], "/d") == ["/d/c.md"]

    def test_plain_file_path(self, cache):
        assert expand_patterns(cache, ["top.txt"], "/") == ["/top.txt"]

    def test_directory_is_not_globbed(self, cache):
        assert expand_patterns(cache, ["a"], "/") == ["/a"]
        assert expand_patterns(cache, ["/"], "/a") == ["/"]

    def test_directory_preserve_root_returns_pattern(self, cache):
        assert expand_patterns(cache, ["../d"], "/a", preserve_root=True) == ["../d"]

    def test_preserve_root_keeps_original_prefix(self, cache):
        result = expand_patterns(cache, ["../d/*.txt"], "/a", preserve_root=True)
        assert result == ["../d/a.txt", "../d/b.txt"]

    def test_preserve_root_without_directory_prefix(self, cache):
        assert expand_patterns(cache, ["*.md"], "/d", preserve_root=True) == ["c.md"]

    def test_missing_directory(self, cache):
        assert expand_patterns(cache, ["/nope/*"], "/") == [PatternError("/nope/*")]

    def test_star_does_not_descend(self, cache):
        assert expand_patterns(cache, ["/a/*"], "/") == ["/a/b", "/a/readme.md"]

    def test_matching_is_case_sensitive(self, cache):
        assert expand_patterns(cache, ["/d/*.TXT"], "/") == [PatternError("/d/*.TXT")]

    def test_results_flattened_in_pattern_order(self, cache):
        result = expand_patterns(cache, ["/d/*.md", "/d/*.zzz", "/a"], "/")
        assert result == ["/d/c.md", PatternError("/d/*.zzz"), "/a"]

    def test_empty_pattern_list(self, cache, mock_client):
        assert expand_patterns(cache, [], "/") == []
        mock_client.metadata.assert_not_called()


class TestPatternError:
    """Tests for the PatternError marker."""

    def test_carries_original_text(self):
        assert PatternError("x*").pattern == "x*"

    def test_str(self):
        assert str(PatternError("*.zzz")) == "*.zzz: No such file or directory"

    def test_not_an_exception(self):
        assert not isinstance(PatternError("x"), BaseException)
