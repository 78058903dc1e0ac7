import ipaddress
import re
from urllib.parse import SplitResult, unquote_plus, urlsplit, urlunsplit

from app.platform.exceptions import (
    BlockedTargetError,
    InvalidUrlError,
    UnsupportedProtocolError,
)

ALLOWED_SCHEMES = ("http", "https")
DEFAULT_PORTS = {"http": 80, "https": 443}

_SCHEME_PREFIX_RE = re.compile(r"^[a-zA-Z]+://")
# Schemes that are written without "//" and would otherwise be mistaken for a host
_OPAQUE_SCHEME_RE = re.compile(
    r"^(data|javascript|mailto|file|about|blob|vbscript|tel):", re.IGNORECASE
)
_HOSTNAME_RE = re.compile(r"^[a-z0-9\-._~%!$&'()*+,;=]+$")


def _ascii_hostname(parsed: SplitResult) -> str:
    hostname = parsed.hostname or ""
    if not hostname.isascii():
        # UnicodeError is a ValueError, callers treat it as a parse failure
        hostname = hostname.encode("idna").decode("ascii")
    return hostname


def _rebuild_netloc(parsed: SplitResult) -> str:
    """
    Lower-case the host and keep userinfo as given. The port is dropped when
    it is the default for the URL's own scheme (http:80, https:443).
    """
    hostname = _ascii_hostname(parsed)
    if ":" in hostname:
        hostname = f"[{hostname}]"

    userinfo = ""
    if "@" in parsed.netloc:
        userinfo = parsed.netloc.rsplit("@", 1)[0] + "@"

    port = parsed.port  # raises ValueError on a malformed port
    if port == DEFAULT_PORTS.get(parsed.scheme.lower()):
        port = None
    return f"{userinfo}{hostname}" + (f":{port}" if port is not None else "")


def _is_valid_hostname(hostname: str) -> bool:
    if not hostname:
        return False
    if ":" in hostname:
        try:
            ipaddress.IPv6Address(hostname)
        except ValueError:
            return False
        return True
    return bool(_HOSTNAME_RE.match(hostname)) and ".." not in hostname


def strip_tracking_params(query: str) -> str:
    """Remove utm_* parameters; remaining pairs keep their order and raw encoding."""
    kept = []
    for pair in query.split("&"):
        if not pair:
            continue
        name = unquote_plus(pair.split("=", 1)[0])
        if name.lower().startswith("utm_"):
            continue
        kept.append(pair)
    return "&".join(kept)


def sanitize_url(url: str) -> str:
    """
    Validate and canonicalize user input into a safe absolute https URL.

    - prepends https:// when no scheme is given
    - rejects anything that is not http(s) (UnsupportedProtocolError)
    - forces https, drops the fragment and every utm_* query parameter

    Pure function, no network I/O.
    """
    url = (url or "").strip()

    if not _SCHEME_PREFIX_RE.match(url):
        if _OPAQUE_SCHEME_RE.match(url):
            scheme = url.split(":", 1)[0].lower()
            raise UnsupportedProtocolError(
                f"Unsupported protocol: {scheme} (must be http or https)"
            )
        url = f"https://{url}"

    try:
        parsed = urlsplit(url)
        scheme = parsed.scheme.lower()

        if scheme not in ALLOWED_SCHEMES:
            raise UnsupportedProtocolError(
                f"Unsupported protocol: {scheme} (must be http or https)"
            )

        if not _is_valid_hostname(_ascii_hostname(parsed)):
            raise InvalidUrlError("Invalid URL format: missing or malformed domain")

        netloc = _rebuild_netloc(parsed)
    except ValueError as e:
        raise InvalidUrlError(f"Invalid URL format: {e}") from e

    return urlunsplit(
        ("https", netloc, parsed.path or "/", strip_tracking_params(parsed.query), "")
    )


def normalize_url(url: str) -> str:
    """
    Soft normalization used to compare two URLs: drops the fragment only.

    Never forces https and never strips tracking parameters. Input that is
    not an absolute URL is returned trimmed and otherwise untouched.
    """
    url = (url or "").strip()
    try:
        parsed = urlsplit(url)
        if not parsed.scheme or not parsed.hostname:
            return url
        netloc = _rebuild_netloc(parsed)
    except ValueError:
        return url

    return urlunsplit(
        (parsed.scheme.lower(), netloc, parsed.path or "/", parsed.query, "")
    )


def _is_blocked_host(hostname: str) -> bool:
    hostname = hostname.rstrip(".").lower()
    if hostname == "localhost" or hostname.endswith(".localhost"):
        return True

    try:
        ip = ipaddress.ip_address(hostname)
    except ValueError:
        return False

    if isinstance(ip, ipaddress.IPv6Address) and ip.ipv4_mapped:
        ip = ip.ipv4_mapped

    return (
        ip.is_loopback
        or ip.is_link_local
        or ip.is_private
        or ip.is_unspecified
        or ip.is_reserved
        or ip.is_multicast
    )


def ensure_public_target(url: str, block_private: bool = True) -> None:
    """
    Fetch-boundary guard, applied to the first request and every redirect hop.
    Non-web schemes are always rejected. With block_private, loopback,
    link-local and private literal addresses are rejected too; hostnames
    are not resolved.
    """
    try:
        parsed = urlsplit(url)
    except ValueError as e:
        raise BlockedTargetError(f"Target URL is malformed: {url}") from e

    if parsed.scheme.lower() not in ALLOWED_SCHEMES:
        raise BlockedTargetError(
            f"Target uses a non-web protocol: {parsed.scheme or 'none'}"
        )

    if block_private and _is_blocked_host(parsed.hostname or ""):
        raise BlockedTargetError(f"Target address is not allowed: {parsed.hostname}")
