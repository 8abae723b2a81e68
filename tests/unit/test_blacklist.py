"""Unit tests for blacklist data models."""

from sinkhole.models.blacklist import (
    BlacklistLoadSummary,
    BlacklistSet,
    SourceLoadResult,
    SourceStatus,
)


class TestBlacklistSet:
    """Test BlacklistSet membership semantics."""

    def test_stores_canonical_forms(self):
        """Test entries are canonicalized on construction."""
        blacklist = BlacklistSet(["ADS.Example.com.", " tracker.example.net "])

        assert sorted(blacklist) == ["ads.example.com", "tracker.example.net"]

    def test_lookup_canonicalizes_probe(self):
        """Test lookups ignore case and trailing dot."""
        blacklist = BlacklistSet(["ads.example.com"])

        assert "ads.example.com" in blacklist
        assert "ADS.EXAMPLE.COM." in blacklist
        assert "Ads.Example.Com" in blacklist

    def test_exact_match_only(self):
        """Test subdomains and parents are not implicitly blocked."""
        blacklist = BlacklistSet(["ads.example.com"])

        assert "example.com" not in blacklist
        assert "cdn.ads.example.com" not in blacklist

    def test_duplicates_collapse(self):
        """Test duplicate insertions are no-ops."""
        blacklist = BlacklistSet(["ads.example.com", "ads.example.com.", "ADS.example.com"])

        assert len(blacklist) == 1

    def test_non_string_is_not_member(self):
        """Test membership of non-strings is False instead of an error."""
        blacklist = BlacklistSet(["ads.example.com"])

        assert None not in blacklist
        assert 42 not in blacklist

    def test_empty(self):
        """Test empty blacklist blocks nothing."""
        blacklist = BlacklistSet()

        assert len(blacklist) == 0
        assert "ads.example.com" not in blacklist


class TestBlacklistLoadSummary:
    """Test BlacklistLoadSummary aggregation."""

    def _results(self):
        return [
            SourceLoadResult("https://a.example/list.txt", SourceStatus.LOADED, 3),
            SourceLoadResult(
                "https://b.example/list.txt", SourceStatus.FAILED, error="timeout"
            ),
            SourceLoadResult("/etc/sinkhole/local.txt", SourceStatus.LOADED, 2),
        ]

    def test_counts(self):
        """Test loaded/failed counters."""
        summary = BlacklistLoadSummary(results=self._results(), distinct_domains=4)

        assert summary.loaded_sources == 2
        assert summary.failed_sources == 1
        assert summary.loaded_sources + summary.failed_sources == len(summary.results)

    def test_to_json(self):
        """Test JSON serialization keeps source order."""
        summary = BlacklistLoadSummary(results=self._results(), distinct_domains=4)

        data = summary.to_json()

        assert data["total_sources"] == 3
        assert data["distinct_domains"] == 4
        assert [s["status"] for s in data["sources"]] == ["LOADED", "FAILED", "LOADED"]
        assert data["sources"][1]["error"] == "timeout"
        assert data["sources"][0]["error"] is None

    def test_source_result_is_loaded(self):
        """Test is_loaded helper."""
        assert SourceLoadResult("x", SourceStatus.LOADED).is_loaded() is True
        assert SourceLoadResult("x", SourceStatus.FAILED).is_loaded() is False
