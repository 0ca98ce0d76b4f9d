"""Derive source metadata from a link."""

from dataclasses import dataclass
from urllib.parse import urlparse

FEED_MARKERS = ("rss", "feed", ".xml")
DEFAULT_CATEGORY = "General"


@dataclass(frozen=True)
class SiteInfo:
    title: str
    description: str
    category: str = DEFAULT_CATEGORY


def looks_like_feed(url: str) -> bool:
    return any(marker in url for marker in FEED_MARKERS)


def extract_site_info(url: str) -> SiteInfo:
    """Build a title from the first label of the host.

    ``https://www.tech-crunch.com/feed`` gives the title ``Tech Crunch``.

    An unparsable link yields an empty title and description.
    """
    try:
        hostname = urlparse(url).hostname
    except ValueError:
        hostname = None
    if not hostname:
        return SiteInfo(title="", description="")

    domain = hostname.replace("www.", "", 1)
    first_label = domain.split(".")[0]
    title = " ".join(word[:1].upper() + word[1:] for word in first_label.split("-"))
    return SiteInfo(title=title, description=f"News from {domain}")
