"""Video locator resolution for podcast sources.

Turns a user supplied video URL into something a player can use:
an embeddable YouTube or Vimeo id, or a direct media URL.
"""

import logging
import re
from typing import Literal
from urllib.parse import parse_qs, urlparse

from pydantic import BaseModel

logger = logging.getLogger(__name__)

VideoKind = Literal["youtube", "vimeo", "direct"]

YOUTUBE_ID_LENGTH = 11

# Fallback media used when a podcast is published without a video
SAMPLE_VIDEO_URL = (
    "http://commondatastorage.googleapis.com/gtv-videos-bucket/sample/ForBiggerBlazes.mp4"
)

_YOUTUBE_ID_RE = re.compile(r"^[A-Za-z0-9_-]{11}$")
_VIMEO_ID_RE = re.compile(r"vimeo\.com/(?:manage/videos/|video/|channels/[\w-]+/)?(\d+)")
_URL_RE = re.compile(r"https?://[^\s<>\"')\]]+", re.IGNORECASE)


class VideoSource(BaseModel):
    """Resolved video locator."""

    kind: VideoKind
    url: str
    video_id: str | None = None

    @property
    def embed_url(self) -> str:
        """URL suitable for an embedded player (the direct URL for plain media)."""
        if self.kind == "youtube":
            return f"https://www.youtube.com/embed/{self.video_id}?autoplay=0&rel=0"
        if self.kind == "vimeo":
            return (
                f"https://player.vimeo.com/video/{self.video_id}"
                "?autoplay=0&title=0&byline=0&portrait=0&badge=0"
            )
        return self.url

    @property
    def is_embedded(self) -> bool:
        return self.kind != "direct"


def extract_youtube_id(url: str) -> str | None:
    """Extract YouTube video ID from URL.

    Handles various YouTube URL formats:
    - youtube.com/watch?v=ID
    - youtu.be/ID
    - youtube.com/embed/ID
    - youtube.com/v/ID
    - youtube.com/shorts/ID

    Only ids of exactly 11 characters are accepted.

    Args:
        url: YouTube URL

    Returns:
        Video ID or None if not a YouTube URL
    """
    parsed = urlparse(url.strip())
    host = parsed.netloc.lower().replace("www.", "")
    candidate = None

    if host in ("youtube.com", "m.youtube.com", "music.youtube.com"):
        if parsed.path == "/watch":
            query = parse_qs(parsed.query)
            if "v" in query:
                candidate = query["v"][0]
        elif parsed.path.startswith(("/embed/", "/v/", "/shorts/")):
            parts = parsed.path.split("/")
            if len(parts) >= 3:
                candidate = parts[2]
    elif host == "youtu.be":
        candidate = parsed.path.lstrip("/").split("/")[0]

    if candidate and _YOUTUBE_ID_RE.match(candidate):
        return candidate

    return None


def extract_vimeo_id(url: str) -> str | None:
    """Extract the numeric Vimeo video id from a URL.

    Args:
        url: Vimeo URL (vimeo.com/ID, vimeo.com/manage/videos/ID, player URLs)

    Returns:
        Numeric id as a string, or None
    """
    match = _VIMEO_ID_RE.search(url)
    return match.group(1) if match else None


def resolve_video_source(url: str | None) -> VideoSource:
    """Resolve a video locator.

    YouTube and Vimeo URLs become embeddable ids. Anything else is treated
    as a direct playable media URL. An empty value resolves to the sample video.

    Args:
        url: User supplied video URL

    Returns:
        VideoSource describing how to play the video
    """
    if not url or not url.strip():
        return VideoSource(kind="direct", url=SAMPLE_VIDEO_URL)

    url = url.strip()

    youtube_id = extract_youtube_id(url)
    if youtube_id:
        return VideoSource(kind="youtube", url=url, video_id=youtube_id)

    vimeo_id = extract_vimeo_id(url)
    if vimeo_id:
        return VideoSource(kind="vimeo", url=url, video_id=vimeo_id)

    return VideoSource(kind="direct", url=url)


def find_embedded_video(text: str) -> VideoSource | None:
    """Find the first embeddable video URL inside free text.

    Args:
        text: Free text such as a podcast description

    Returns:
        VideoSource for the first YouTube/Vimeo URL, or None
    """
    for match in _URL_RE.finditer(text or ""):
        source = resolve_video_source(match.group(0))
        if source.is_embedded:
            logger.debug(f"Found embedded {source.kind} video in text: {source.video_id}")
            return source

    return None
