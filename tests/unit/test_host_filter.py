"""Unit tests for host pattern filtering."""

import pytest

from gethosts.host_filter import HostPattern, split_hosts

HOSTS = "alpha\nbeta\nalphabet\n"


class TestHostPatternParse:
    """Test splitting of the [prefix@]pattern argument."""

    def test_plain_pattern(self):
        assert HostPattern.parse("alpha") == HostPattern(pattern="alpha", display_prefix="")

    def test_prefix_and_pattern(self):
        assert HostPattern.parse("P@alpha") == HostPattern(pattern="alpha", display_prefix="P")

    def test_splits_at_first_at_sign(self):
        """Later '@' characters belong to the pattern."""
        hp = HostPattern.parse("root@web@dc1")
        assert hp.display_prefix == "root"
        assert hp.pattern == "web@dc1"

    def test_prefix_only(self):
        """Trailing '@' means an empty pattern."""
        assert HostPattern.parse("root@") == HostPattern(pattern="", display_prefix="root")


class TestHostPatternApply:
    """Test selecting and prefixing output lines."""

    def test_prefix_match_keeps_order(self):
        assert HostPattern.parse("alpha").apply(HOSTS) == ["alpha", "alphabet"]

    def test_display_prefix_is_prepended(self):
        assert HostPattern.parse("P@alpha").apply(HOSTS) == ["Palpha", "Palphabet"]

    def test_match_is_prefix_not_substring(self):
        """Pattern found only inside names selects nothing."""
        assert HostPattern.parse("pha").apply(HOSTS) == []

    def test_partial_prefix_matches(self):
        assert HostPattern.parse("bet").apply(HOSTS) == ["beta"]

    def test_empty_pattern_selects_all_hosts(self):
        """Empty pattern matches every host but not the trailing empty line."""
        assert HostPattern.parse("x@").apply(HOSTS) == ["xalpha", "xbeta", "xalphabet"]

    def test_empty_host_list(self):
        assert HostPattern.parse("alpha").apply("") == []

    def test_case_sensitive(self):
        assert HostPattern.parse("Alpha").apply(HOSTS) == []


class TestSplitHosts:
    """Test splitting host list text."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("", []),
            ("\n", [""]),
            ("a\n", ["a"]),
            ("a\nb\n", ["a", "b"]),
            ("a\nb", ["a", "b"]),
        ],
    )
    def test_split(self, text, expected):
        assert split_hosts(text) == expected
