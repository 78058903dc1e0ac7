"""
SEO rule catalog.

Each rule group is a plain function returning the issues it produced.
Groups run in RULE_GROUPS order, so the issue sequence is deterministic
for identical metadata.
"""
from typing import Callable, List, Optional, Tuple

from app.features.seo.schemas.seo import (
    BaseMeta,
    OpenGraphMeta,
    SeoIssue,
    Severity,
    TwitterMeta,
)
from app.platform.utils.url_validator import normalize_url

# SEO Best Practice Constants
TITLE_MIN_LENGTH = 30
TITLE_MAX_LENGTH = 60
DESCRIPTION_MIN_LENGTH = 70
DESCRIPTION_MAX_LENGTH = 170


def _issue(
    id: str,
    level: Severity,
    message: str,
    field: str,
    recommendation: Optional[str] = None,
) -> SeoIssue:
    return SeoIssue(id=id, level=level, message=message, field=field, recommendation=recommendation)


def evaluate_title(meta: BaseMeta) -> List[SeoIssue]:
    if not meta.title:
        return [_issue(
            "title_missing", Severity.ERROR,
            "The <title> tag is missing (0 characters).",
            "title",
            f"Set a unique, descriptive page title ({TITLE_MIN_LENGTH}-{TITLE_MAX_LENGTH} characters).",
        )]

    length = len(meta.title)
    if length < TITLE_MIN_LENGTH:
        return [_issue(
            "title_too_short", Severity.WARNING,
            f"Title is too short ({length} characters).",
            "title",
            f"Use a title between {TITLE_MIN_LENGTH} and {TITLE_MAX_LENGTH} characters, including the main keyword.",
        )]
    if length > TITLE_MAX_LENGTH:
        return [_issue(
            "title_too_long", Severity.WARNING,
            f"Title is too long ({length} characters).",
            "title",
            "Keep the title around 50-60 characters to avoid truncation in search results.",
        )]
    return [_issue("title_ok", Severity.SUCCESS, f"Title has a good length ({length} characters).", "title")]


def evaluate_description(meta: BaseMeta) -> List[SeoIssue]:
    if not meta.description:
        return [_issue(
            "description_missing", Severity.WARNING,
            "Meta description is missing (0 characters).",
            "description",
            'Add a unique, persuasive <meta name="description"> (70-160 characters).',
        )]

    length = len(meta.description)
    if length < DESCRIPTION_MIN_LENGTH:
        return [_issue(
            "description_too_short", Severity.INFO,
            f"Meta description is short ({length} characters).",
            "description",
            "Describe the page content in more detail, ideally with 120-160 characters.",
        )]
    if length > DESCRIPTION_MAX_LENGTH:
        return [_issue(
            "description_too_long", Severity.WARNING,
            f"Meta description is long ({length} characters).",
            "description",
            "Reduce it to about 160 characters to minimize truncation.",
        )]
    return [_issue(
        "description_ok", Severity.SUCCESS,
        f"Meta description has a good length ({length} characters).",
        "description",
    )]


def evaluate_canonical(comparison_url: str, meta: BaseMeta) -> List[SeoIssue]:
    """
    Exactly one of: missing, relative, differs, ok.
    """
    if not meta.canonical:
        return [_issue(
            "canonical_missing", Severity.INFO,
            "Canonical tag is missing.",
            "canonical",
            "Consider adding a canonical tag pointing to the preferred URL to avoid duplicate content.",
        )]

    normalized = normalize_url(comparison_url)
    canonical = normalize_url(meta.canonical)

    if not canonical.startswith("http"):
        return [_issue(
            "canonical_relative", Severity.WARNING,
            f"Canonical tag is relative: {meta.canonical}",
            "canonical",
            "Always use absolute URLs in the canonical tag (including protocol and domain).",
        )]
    if canonical != normalized and not canonical.endswith("/"):
        return [_issue(
            "canonical_differs", Severity.INFO,
            f"Canonical URL ({canonical}) differs from the analyzed URL ({normalized}).",
            "canonical",
            "Check that the canonical should really point to another URL (for example, a version without parameters).",
        )]
    return [_issue("canonical_ok", Severity.SUCCESS, f"Canonical tag is set correctly: {canonical}", "canonical")]


def evaluate_robots(meta: BaseMeta) -> List[SeoIssue]:
    """noindex and nofollow are independent and may both fire."""
    if not meta.robots:
        return [_issue("robots_none", Severity.SUCCESS, "No meta robots (default: index, follow).", "robots")]

    value = meta.robots.lower()
    issues: List[SeoIssue] = []
    if "noindex" in value:
        issues.append(_issue(
            "robots_noindex", Severity.WARNING,
            f'Page is marked "noindex" (robots: {meta.robots}).',
            "robots",
            "Confirm that you really intend to keep this page out of search indexes.",
        ))
    if "nofollow" in value:
        issues.append(_issue(
            "robots_nofollow", Severity.INFO,
            f'Page is marked "nofollow" (robots: {meta.robots}).',
            "robots",
            "Confirm that links on this page should really not be followed.",
        ))
    if not issues:
        issues.append(_issue("robots_ok", Severity.SUCCESS, f"Meta robots configured: {meta.robots}", "robots"))
    return issues


def evaluate_lang(meta: BaseMeta) -> List[SeoIssue]:
    if not meta.lang:
        return [_issue(
            "lang_missing", Severity.INFO,
            "Language declaration (lang attribute on <html>) was not found.",
            "lang",
            'Set the lang attribute on <html>, for example lang="en".',
        )]
    return [_issue("lang_ok", Severity.SUCCESS, f"lang attribute present: {meta.lang}", "lang")]


def evaluate_charset(meta: BaseMeta) -> List[SeoIssue]:
    if not meta.charset:
        return [_issue(
            "charset_missing", Severity.INFO,
            "Meta charset was not found.",
            "charset",
            'Declare <meta charset="utf-8"> to guarantee consistent encoding.',
        )]
    return [_issue("charset_ok", Severity.SUCCESS, f"Meta charset declared: {meta.charset}", "charset")]


def evaluate_open_graph(open_graph: OpenGraphMeta) -> List[SeoIssue]:
    missing = [
        f"og:{name}"
        for name in ("title", "description", "image")
        if not getattr(open_graph, name)
    ]
    if missing:
        return [_issue(
            "og_incomplete", Severity.WARNING,
            f"Important Open Graph tags are incomplete (missing: {', '.join(missing)}).",
            "open_graph",
            "Include at least og:title, og:description and og:image for good previews on Facebook, Discord and Mastodon.",
        )]
    return [_issue("og_ok", Severity.SUCCESS, "Main Open Graph tags are configured.", "open_graph")]


def evaluate_twitter(open_graph: OpenGraphMeta, twitter: TwitterMeta) -> List[SeoIssue]:
    issues: List[SeoIssue] = []
    if not twitter.card:
        issues.append(_issue(
            "twitter_card_missing", Severity.INFO,
            "Meta twitter:card is missing.",
            "twitter",
            'Add <meta name="twitter:card" content="summary_large_image"> for a good preview on X (Twitter).',
        ))
    else:
        issues.append(_issue("twitter_ok", Severity.SUCCESS, f"Meta twitter:card present: {twitter.card}", "twitter"))

    # X falls back to og:* when twitter:* is absent
    if not twitter.title and open_graph.title:
        issues.append(_issue(
            "twitter_title_missing", Severity.INFO,
            f"twitter:title is missing; X will fall back to og:title ({open_graph.title}).",
            "twitter",
            "Replicate og:title in twitter:title to control the preview on X (Twitter).",
        ))
    if not twitter.description and open_graph.description:
        issues.append(_issue(
            "twitter_description_missing", Severity.INFO,
            f"twitter:description is missing; X will fall back to og:description ({len(open_graph.description)} characters).",
            "twitter",
            "Replicate og:description in twitter:description to control the preview on X (Twitter).",
        ))
    return issues


RuleGroup = Callable[[str, BaseMeta, OpenGraphMeta, TwitterMeta], List[SeoIssue]]

RULE_GROUPS: Tuple[Tuple[str, RuleGroup], ...] = (
    ("title", lambda url, meta, og, tw: evaluate_title(meta)),
    ("description", lambda url, meta, og, tw: evaluate_description(meta)),
    ("canonical", lambda url, meta, og, tw: evaluate_canonical(url, meta)),
    ("robots", lambda url, meta, og, tw: evaluate_robots(meta)),
    ("lang", lambda url, meta, og, tw: evaluate_lang(meta)),
    ("charset", lambda url, meta, og, tw: evaluate_charset(meta)),
    ("open_graph", lambda url, meta, og, tw: evaluate_open_graph(og)),
    ("twitter", lambda url, meta, og, tw: evaluate_twitter(og, tw)),
)


def evaluate_seo(
    comparison_url: str,
    meta: BaseMeta,
    open_graph: OpenGraphMeta,
    twitter: TwitterMeta,
) -> Tuple[SeoIssue, ...]:
    """Run every rule group in order and return the combined issue sequence."""
    issues: List[SeoIssue] = []
    for _, rule in RULE_GROUPS:
        issues.extend(rule(comparison_url, meta, open_graph, twitter))
    return tuple(issues)
