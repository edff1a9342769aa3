"""URL scraping service for resolving bookmark metadata from web pages."""
import asyncio
import ipaddress
import logging
import re
import socket
from collections.abc import Callable
from dataclasses import dataclass
from html import unescape
from io import BytesIO
from urllib.parse import urljoin, urlparse

import httpx
from bs4 import BeautifulSoup, Tag
from pypdf import PdfReader

from services.media_detector import MediaType, detect_media

logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
DEFAULT_TIMEOUT = 10.0

# Pages can be large; metadata lives in <head>, so parsing is capped
MAX_HTML_CHARS = 2_000_000
# Bytes read from a response body; the rest is never downloaded
MAX_CONTENT_BYTES = 10_000_000
MAX_REDIRECTS = 10

_WHITESPACE = re.compile(r"\s+")


class SSRFBlockedError(Exception):
    """Raised when a URL targets a private/internal network address."""

    pass


def is_valid_url(url: str | None) -> bool:
    """Check that a URL is absolute http(s) with a hostname."""
    if not url or not url.strip():
        return False
    try:
        parsed = urlparse(url.strip())
        return parsed.scheme in ("http", "https") and bool(parsed.hostname)
    except ValueError:
        return False


def is_private_ip(ip_str: str) -> bool:
    """
    Check if an IP address is private, loopback, or otherwise internal.

    Unparseable addresses count as private.
    """
    try:
        ip = ipaddress.ip_address(ip_str)
    except ValueError:
        return True
    return (
        ip.is_private
        or ip.is_loopback
        or ip.is_link_local
        or ip.is_multicast
        or ip.is_reserved
        or ip.is_unspecified
    )


def _is_ip_literal(hostname: str) -> bool:
    try:
        ipaddress.ip_address(hostname)
    except ValueError:
        return False
    return True


async def resolve_host_addresses(hostname: str) -> list[str]:
    """Resolve a hostname to its IP addresses on the event loop's resolver."""
    loop = asyncio.get_running_loop()
    addrinfo = await loop.getaddrinfo(
        hostname, None, family=socket.AF_UNSPEC, type=socket.SOCK_STREAM,
    )
    return [str(sockaddr[0]) for _, _, _, _, sockaddr in addrinfo]


async def validate_url_not_private(url: str) -> None:
    """
    Validate that a URL does not target a private/internal network.

    The hostname is resolved so that names pointing at internal addresses are
    rejected too.

    Raises:
        SSRFBlockedError: If the URL targets a private network.
        ValueError: If the URL has no hostname or it cannot be resolved.
    """
    hostname = urlparse(url).hostname
    if not hostname:
        raise ValueError(f"Invalid URL (no hostname): {url}")
    if hostname.lower() in ("localhost", "localhost.localdomain"):
        raise SSRFBlockedError(f"Blocked request to localhost: {url}")

    if _is_ip_literal(hostname):
        addresses = [hostname]
    else:
        try:
            addresses = await resolve_host_addresses(hostname)
        except socket.gaierror as e:
            raise ValueError(f"Could not resolve hostname: {hostname}") from e

    for ip_str in addresses:
        if is_private_ip(ip_str):
            raise SSRFBlockedError(
                f"Blocked request to private/internal address: {url} resolves to {ip_str}",
            )


@dataclass
class FetchResult:
    """Result of fetching a URL (raw content before extraction)."""

    content: str | bytes | None  # str for HTML, bytes for PDF
    final_url: str
    status_code: int | None
    content_type: str | None
    error: str | None

    @property
    def is_pdf(self) -> bool:
        """Check if the content type indicates a PDF."""
        return bool(self.content_type and "application/pdf" in self.content_type.lower())


@dataclass
class ResolvedMetadata:
    """
    Normalized metadata for a bookmark candidate.

    Unresolved fields are empty: "" for text, None for URLs, "default" for the
    media type.
    """

    title: str = ""
    description: str = ""
    preview_image_url: str | None = None
    icon_url: str | None = None
    media_type: str = MediaType.DEFAULT.value
    media_embed_id: str = ""


def _failed(url: str, error: str) -> FetchResult:
    return FetchResult(
        content=None, final_url=url, status_code=None, content_type=None, error=error,
    )


async def _read_capped(response: httpx.Response) -> bytes:
    """Read at most MAX_CONTENT_BYTES of a streamed body, then stop downloading."""
    chunks: list[bytes] = []
    size = 0
    async for chunk in response.aiter_bytes():
        chunks.append(chunk)
        size += len(chunk)
        if size >= MAX_CONTENT_BYTES:
            logger.info("Truncated response body from %s at %d bytes", response.url, size)
            break
    return b"".join(chunks)[:MAX_CONTENT_BYTES]


async def _read_response(response: httpx.Response, final_url: str) -> FetchResult:
    content_type = response.headers.get("content-type", "")
    if not response.is_success:
        return FetchResult(
            content=None,
            final_url=final_url,
            status_code=response.status_code,
            content_type=content_type,
            error=f"HTTP {response.status_code}",
        )

    lowered = content_type.lower()
    if "application/pdf" in lowered:
        return FetchResult(
            content=await _read_capped(response),
            final_url=final_url,
            status_code=response.status_code,
            content_type=content_type,
            error=None,
        )
    if "text/html" in lowered or "application/xhtml+xml" in lowered:
        body = await _read_capped(response)
        return FetchResult(
            content=body.decode(response.encoding or "utf-8", errors="replace"),
            final_url=final_url,
            status_code=response.status_code,
            content_type=content_type,
            error=None,
        )
    return FetchResult(
        content=None,
        final_url=final_url,
        status_code=response.status_code,
        content_type=content_type,
        error=f"Unsupported content type: {content_type}",
    )


async def _follow(client: httpx.AsyncClient, url: str) -> FetchResult:
    """Request url, following redirects by hand so every hop is checked before it is sent."""
    current = url
    for hop in range(MAX_REDIRECTS + 1):
        try:
            await validate_url_not_private(current)
        except (SSRFBlockedError, ValueError) as e:
            if hop == 0:
                return _failed(url, str(e))
            return _failed(current, f"Redirect blocked: {e}")

        async with client.stream("GET", current) as response:
            if not response.is_redirect:
                return await _read_response(response, current)
            location = response.headers["location"]
        current = urljoin(current, location)
        logger.debug("Following redirect to %s", current)

    return _failed(current, f"Too many redirects (more than {MAX_REDIRECTS})")


async def fetch_url(url: str, timeout: float = DEFAULT_TIMEOUT) -> FetchResult:  # noqa: ASYNC109
    """
    Fetch a URL for metadata extraction (HTML or PDF).

    Best-effort: every failure is reported through FetchResult.error instead of
    raising. Redirects are followed up to MAX_REDIRECTS hops and the final URL
    captured; every hop must pass the private-network check before it is
    requested. The timeout bounds the whole fetch, DNS lookups and body
    included, and at most MAX_CONTENT_BYTES of the body are read.

    Args:
        url: The URL to fetch.
        timeout: Overall deadline in seconds.

    Returns:
        FetchResult with content (str for HTML, bytes for PDF) or error info.
    """
    try:
        async with asyncio.timeout(timeout):
            async with httpx.AsyncClient(
                follow_redirects=False,
                timeout=timeout,
                headers={"User-Agent": USER_AGENT},
                http2=True,
            ) as client:
                return await _follow(client, url)
    except (TimeoutError, httpx.TimeoutException):
        return _failed(url, "Request timed out")
    except httpx.RequestError as e:
        return _failed(url, f"Request failed: {e}")


# -----------------------------------------------------------------------------
# Extractors: each returns a value or None; a chain returns the first hit.
# -----------------------------------------------------------------------------

Extractor = Callable[[BeautifulSoup], str | None]


def _clean(value: str | None) -> str | None:
    """Unescape entities and collapse whitespace; empty becomes None."""
    if value is None:
        return None
    cleaned = _WHITESPACE.sub(" ", unescape(value)).strip()
    return cleaned or None


def _meta_property(name: str) -> Extractor:
    """Extractor for <meta property="..."> (Open Graph style)."""
    def extract(soup: BeautifulSoup) -> str | None:
        tag = soup.find("meta", attrs={"property": name})
        if tag is None:
            # Some sites put Open Graph keys in name= instead of property=
            tag = soup.find("meta", attrs={"name": name})
        return _clean(tag.get("content")) if isinstance(tag, Tag) else None
    return extract


def _meta_name(name: str) -> Extractor:
    """Extractor for <meta name="...">."""
    def extract(soup: BeautifulSoup) -> str | None:
        tag = soup.find("meta", attrs={"name": name})
        return _clean(tag.get("content")) if isinstance(tag, Tag) else None
    return extract


def _title_tag(soup: BeautifulSoup) -> str | None:
    tag = soup.find("title")
    return _clean(tag.get_text()) if isinstance(tag, Tag) else None


def _link_rel(*rel_values: str) -> Extractor:
    """Extractor for the first <link> whose rel contains one of rel_values."""
    wanted = {value.lower() for value in rel_values}

    def extract(soup: BeautifulSoup) -> str | None:
        for tag in soup.find_all("link", href=True):
            rels = tag.get("rel") or []
            if isinstance(rels, str):
                rels = rels.split()
            if wanted.intersection(rel.lower() for rel in rels):
                href = _clean(tag.get("href"))
                if href:
                    return href
        return None
    return extract


def _declared_tiny(tag: Tag) -> bool:
    """True for images declared 1px or smaller (tracking pixels, spacers)."""
    for attr in ("width", "height"):
        value = str(tag.get(attr) or "").strip().removesuffix("px")
        if value.isdigit() and int(value) <= 1:
            return True
    return False


def _first_plausible_img(soup: BeautifulSoup) -> str | None:
    for tag in soup.find_all("img"):
        src = _clean(tag.get("src"))
        if not src or src.lower().startswith("data:"):
            continue
        if _declared_tiny(tag):
            continue
        return src
    return None


def _first(soup: BeautifulSoup, extractors: list[Extractor]) -> str | None:
    """Run extractors in priority order and return the first non-empty value."""
    for extractor in extractors:
        value = extractor(soup)
        if value:
            return value
    return None


TITLE_EXTRACTORS: list[Extractor] = [
    _meta_property("og:title"),
    _meta_name("twitter:title"),
    _meta_name("title"),
    _title_tag,
]

DESCRIPTION_EXTRACTORS: list[Extractor] = [
    _meta_property("og:description"),
    _meta_name("description"),
    _meta_name("twitter:description"),
]

IMAGE_EXTRACTORS: list[Extractor] = [
    _meta_property("og:image"),
    _meta_property("og:image:secure_url"),
    _meta_property("og:image:url"),
    _meta_name("twitter:image"),
    _meta_name("twitter:image:src"),
    _link_rel("image_src"),
    _first_plausible_img,
]

ICON_EXTRACTORS: list[Extractor] = [
    _link_rel("icon"),
    _link_rel("apple-touch-icon", "apple-touch-icon-precomposed"),
]


def _absolute(value: str | None, base_url: str) -> str | None:
    """Resolve a possibly relative URL against the page URL; non-http results are dropped."""
    if not value:
        return None
    resolved = urljoin(base_url, value)
    return resolved if is_valid_url(resolved) else None


def default_favicon_url(page_url: str) -> str | None:
    """Conventional /favicon.ico location for a page's origin."""
    if not is_valid_url(page_url):
        return None
    parsed = urlparse(page_url)
    return f"{parsed.scheme}://{parsed.netloc}/favicon.ico"


def extract_html_metadata(html: str, page_url: str) -> ResolvedMetadata:
    """
    Extract title, description, preview image, and icon from HTML.

    Pure function with no I/O. Each field is taken from the first extractor in
    its chain that yields a value:

    - title: og:title, twitter:title, <meta name="title">, <title>
    - description: og:description, <meta name="description">, twitter:description
    - preview image: og:image variants, twitter:image, <link rel="image_src">,
      first plausible <img>
    - icon: <link rel="icon">/"shortcut icon", apple-touch-icon, then the
      origin's /favicon.ico

    Relative image and icon URLs are resolved against page_url. Media fields
    are left at their defaults.

    Args:
        html: Raw HTML string to parse.
        page_url: Final URL of the page (after redirects).

    Returns:
        ResolvedMetadata with page-derived fields populated where found.
    """
    soup = BeautifulSoup(html[:MAX_HTML_CHARS], "lxml")

    return ResolvedMetadata(
        title=_first(soup, TITLE_EXTRACTORS) or "",
        description=_first(soup, DESCRIPTION_EXTRACTORS) or "",
        preview_image_url=_absolute(_first(soup, IMAGE_EXTRACTORS), page_url),
        icon_url=(
            _absolute(_first(soup, ICON_EXTRACTORS), page_url)
            or default_favicon_url(page_url)
        ),
    )


def extract_pdf_metadata(pdf_bytes: bytes, page_url: str) -> ResolvedMetadata:
    """
    Extract title and description from PDF document metadata.

    Uses /Title for the title and /Subject for the description. PDF metadata
    is frequently missing, so empty results are normal.
    """
    try:
        meta = PdfReader(BytesIO(pdf_bytes)).metadata
    except Exception as e:
        logger.warning("Could not read PDF metadata for %s: %s", page_url, e)
        meta = None

    title = _clean(meta.title) if meta and meta.title else None
    description = _clean(meta.subject) if meta and meta.subject else None
    return ResolvedMetadata(
        title=title or "",
        description=description or "",
        icon_url=default_favicon_url(page_url),
    )


async def resolve_metadata(
    target_url: str,
    timeout: float = DEFAULT_TIMEOUT,  # noqa: ASYNC109
) -> ResolvedMetadata:
    """
    Resolve bookmark metadata for a URL.

    Never raises. Invalid URLs return an all-empty record; unreachable,
    non-HTML, or unparseable pages return empty page fields. Media detection
    runs on target_url itself, so it is independent of whether the fetch
    succeeded.

    Args:
        target_url: The URL the user wants to bookmark.
        timeout: Fetch timeout in seconds.

    Returns:
        ResolvedMetadata (possibly empty).
    """
    if not is_valid_url(target_url):
        return ResolvedMetadata()

    target_url = target_url.strip()
    media = detect_media(target_url)

    result = await fetch_url(target_url, timeout)
    metadata = ResolvedMetadata()
    if result.error:
        logger.warning("Metadata fetch failed for %s: %s", target_url, result.error)
    else:
        try:
            if result.is_pdf:
                metadata = extract_pdf_metadata(result.content, result.final_url)
            else:
                metadata = extract_html_metadata(result.content, result.final_url)
        except Exception:
            logger.warning("Metadata extraction failed for %s", target_url, exc_info=True)
            metadata = ResolvedMetadata()

    metadata.media_type = media.media_type.value
    metadata.media_embed_id = media.embed_id
    return metadata
