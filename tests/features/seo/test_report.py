import pytest

from app.features.seo.schemas.seo import (
    BaseMeta,
    OpenGraphMeta,
    SeoIssue,
    Severity,
    TwitterMeta,
)
from app.features.seo.services.report import (
    build_analysis_result,
    build_google_preview,
    build_previews,
    group_issues_by_level,
    score_to_rating,
    summarize_issues,
)


def make_issues(**counts):
    issues = []
    for level_name, count in counts.items():
        level = Severity(level_name)
        issues.extend(
            SeoIssue(id=f"{level_name}_{n}", level=level, message="m") for n in range(count)
        )
    return tuple(issues)


class TestSummarizeIssues:

    def test_groups_in_display_order(self):
        issues = (
            SeoIssue(id="a", level=Severity.SUCCESS, message="m"),
            SeoIssue(id="b", level=Severity.ERROR, message="m"),
            SeoIssue(id="c", level=Severity.INFO, message="m"),
            SeoIssue(id="d", level=Severity.ERROR, message="m"),
        )
        groups = group_issues_by_level(issues)

        assert list(groups) == [Severity.ERROR, Severity.WARNING, Severity.INFO, Severity.SUCCESS]
        assert [i.id for i in groups[Severity.ERROR]] == ["b", "d"]
        assert groups[Severity.WARNING] == ()

    def test_all_success_is_perfect(self):
        summary = summarize_issues(make_issues(success=5, info=3))

        assert summary.score == 100
        assert summary.rating == "perfect"
        assert summary.successes == 5
        assert summary.info == 3

    def test_weighted_ratio(self):
        # (2 * 1 + 1 * 0.5 + 1 * 0) / 4 = 0.625
        summary = summarize_issues(make_issues(success=2, warning=1, error=1))

        assert summary.score == 63
        assert summary.rating == "needs_improvement"
        assert (summary.errors, summary.warnings, summary.successes) == (1, 1, 2)

    def test_rounds_half_up(self):
        # (1 * 0.5) / 8 * 100 = 6.25 -> 6 ; (3 * 1 + 1 * 0.5) / 4 * 100 = 87.5 -> 88
        assert summarize_issues(make_issues(warning=1, error=7)).score == 6
        assert summarize_issues(make_issues(success=3, warning=1)).score == 88

    def test_info_only_scores_zero(self):
        summary = summarize_issues(make_issues(info=4))
        assert summary.score == 0
        assert summary.rating == "critical"

    def test_empty(self):
        assert summarize_issues(()).score == 0

    @pytest.mark.parametrize(
        "score, rating",
        [(0, "critical"), (49, "critical"), (50, "needs_improvement"), (84, "needs_improvement"),
         (85, "good"), (99, "good"), (100, "perfect")],
    )
    def test_rating_bands(self, score, rating):
        assert score_to_rating(score) == rating


class TestPreviews:

    def test_google_display_url_drops_scheme_and_trailing_slash(self):
        preview = build_google_preview("https://example.com:8443/blog/", BaseMeta(title="T"))

        assert preview.display_url == "example.com:8443/blog"
        assert preview.title == "T"
        assert preview.description is None

    def test_google_display_url_for_root(self):
        assert build_google_preview("https://example.com/", BaseMeta()).display_url == "example.com"

    def test_google_display_url_falls_back_to_raw(self):
        assert build_google_preview("not a url", BaseMeta()).display_url == "not a url"

    def test_social_fallback_chains(self):
        previews = build_previews(
            "https://example.com/post",
            BaseMeta(title="Base title", description="Base description"),
            OpenGraphMeta(title="OG title", image="https://example.com/og.png"),
            TwitterMeta(description="TW description", image="https://example.com/tw.png"),
        )
        social = {p.platform: p for p in previews.social}

        assert list(social) == ["facebook", "x", "mastodon", "discord"]

        x = social["x"]
        assert x.title == "OG title"
        assert x.description == "TW description"
        assert x.image == "https://example.com/tw.png"
        assert x.host == "example.com"

        facebook = social["facebook"]
        assert facebook.title == "OG title"
        assert facebook.description == "Base description"
        assert facebook.image == "https://example.com/og.png"

    def test_social_values_none_when_chain_empty(self):
        previews = build_previews("https://example.com/", BaseMeta(), OpenGraphMeta(), TwitterMeta())

        for preview in previews.social:
            assert preview.title is None
            assert preview.description is None
            assert preview.image is None


class TestBuildAnalysisResult:

    def test_prefers_final_url(self):
        result = build_analysis_result(
            requested_url="https://example.com/",
            final_url="https://www.example.com/home#top",
            html="<html></html>",
            meta=BaseMeta(),
            open_graph=OpenGraphMeta(),
            twitter=TwitterMeta(),
            issues=(),
        )

        assert result.url == "https://example.com/"
        assert result.normalized_url == "https://www.example.com/home"
        assert result.html_length == len("<html></html>")

    def test_falls_back_to_requested_url(self):
        result = build_analysis_result(
            requested_url="https://example.com/",
            final_url=None,
            html="",
            meta=BaseMeta(),
            open_graph=OpenGraphMeta(),
            twitter=TwitterMeta(),
            issues=make_issues(success=1),
        )

        assert result.normalized_url == "https://example.com/"
        assert result.html_length == 0
        assert result.summary.score == 100

    def test_serializes_with_camel_case_keys(self):
        result = build_analysis_result(
            requested_url="https://example.com/",
            final_url="https://example.com/",
            html="<p>é</p>",
            meta=BaseMeta(title="T"),
            open_graph=OpenGraphMeta(site_name="Site"),
            twitter=TwitterMeta(),
            issues=(),
        )
        data = result.model_dump(by_alias=True)

        assert data["normalizedUrl"] == "https://example.com/"
        assert data["htmlLength"] == 8
        assert data["openGraph"]["siteName"] == "Site"
        assert data["previews"]["google"]["displayUrl"] == "example.com"

    def test_result_is_frozen(self):
        result = build_analysis_result(
            requested_url="https://example.com/",
            final_url=None,
            html="",
            meta=BaseMeta(),
            open_graph=OpenGraphMeta(),
            twitter=TwitterMeta(),
            issues=(),
        )
        with pytest.raises(Exception):
            result.url = "https://other.example/"
