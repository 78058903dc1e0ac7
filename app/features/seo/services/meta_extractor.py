from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from bs4 import BeautifulSoup

from app.features.seo.schemas.seo import BaseMeta, OpenGraphMeta, TwitterMeta


@dataclass(frozen=True)
class FieldLookup:
    """
    One way of reading a metadata value from the document.

    selector:  CSS selector, the first match is used
    attribute: attribute to read, or None for the element's text
    after:     keep only the text after this marker (case-insensitive)
    """
    selector: str
    attribute: Optional[str] = None
    after: Optional[str] = None


BASE_META_LOOKUPS: Dict[str, Tuple[FieldLookup, ...]] = {
    "title": (FieldLookup("head > title"),),
    "description": (FieldLookup('meta[name="description"]', "content"),),
    "robots": (FieldLookup('meta[name="robots"]', "content"),),
    "canonical": (FieldLookup('link[rel="canonical"]', "href"),),
    "lang": (
        FieldLookup("html", "lang"),
        FieldLookup('meta[http-equiv="content-language" i]', "content"),
    ),
    "charset": (
        FieldLookup("meta[charset]", "charset"),
        FieldLookup('meta[http-equiv="content-type" i]', "content", after="charset="),
    ),
}

OPEN_GRAPH_LOOKUPS: Dict[str, Tuple[FieldLookup, ...]] = {
    "title": (FieldLookup('meta[property="og:title"]', "content"),),
    "description": (FieldLookup('meta[property="og:description"]', "content"),),
    "image": (FieldLookup('meta[property="og:image"]', "content"),),
    "url": (FieldLookup('meta[property="og:url"]', "content"),),
    "type": (FieldLookup('meta[property="og:type"]', "content"),),
    "site_name": (FieldLookup('meta[property="og:site_name"]', "content"),),
}

TWITTER_LOOKUPS: Dict[str, Tuple[FieldLookup, ...]] = {
    "card": (FieldLookup('meta[name="twitter:card"]', "content"),),
    "title": (FieldLookup('meta[name="twitter:title"]', "content"),),
    "description": (FieldLookup('meta[name="twitter:description"]', "content"),),
    "image": (FieldLookup('meta[name="twitter:image"]', "content"),),
    "site": (FieldLookup('meta[name="twitter:site"]', "content"),),
    "creator": (FieldLookup('meta[name="twitter:creator"]', "content"),),
}


class MetaExtractorService:

    @staticmethod
    def parse(html: str) -> BeautifulSoup:
        return BeautifulSoup(html or "", "lxml")


    @staticmethod
    def read(soup: BeautifulSoup, lookup: FieldLookup) -> Optional[str]:
        """Apply a single lookup. Returns a trimmed non-empty string or None."""
        element = soup.select_one(lookup.selector)
        if element is None:
            return None

        if lookup.attribute is None:
            raw = element.get_text()
        else:
            raw = element.get(lookup.attribute)
            if isinstance(raw, list):  # multi-valued attributes such as rel
                raw = " ".join(raw)
        if not isinstance(raw, str):
            return None

        if lookup.after is not None:
            lowered = raw.lower()
            index = lowered.find(lookup.after.lower())
            if index == -1:
                return None
            raw = raw[index + len(lookup.after):]

        value = raw.strip()
        return value or None


    @staticmethod
    def resolve(soup: BeautifulSoup, lookups: Tuple[FieldLookup, ...]) -> Optional[str]:
        """First lookup that yields a value wins"""
        for lookup in lookups:
            value = MetaExtractorService.read(soup, lookup)
            if value is not None:
                return value
        return None


    @staticmethod
    def _extract_table(soup: BeautifulSoup, table: Dict[str, Tuple[FieldLookup, ...]]) -> Dict[str, Optional[str]]:
        return {
            field_name: MetaExtractorService.resolve(soup, lookups)
            for field_name, lookups in table.items()
        }


    @staticmethod
    def extract_meta(soup: BeautifulSoup) -> Tuple[BaseMeta, OpenGraphMeta, TwitterMeta]:
        """
        Extract base, Open Graph and Twitter metadata from a parsed document.

        Missing tags are the normal case and simply produce None fields.

        Example:
            soup = MetaExtractorService.parse(html)
            meta, open_graph, twitter = MetaExtractorService.extract_meta(soup)
            print(meta.title, open_graph.image, twitter.card)
        """
        meta = BaseMeta(**MetaExtractorService._extract_table(soup, BASE_META_LOOKUPS))
        open_graph = OpenGraphMeta(**MetaExtractorService._extract_table(soup, OPEN_GRAPH_LOOKUPS))
        twitter = TwitterMeta(**MetaExtractorService._extract_table(soup, TWITTER_LOOKUPS))
        return meta, open_graph, twitter
