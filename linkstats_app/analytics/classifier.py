"""
User-Agent and Referer classification.

Pure string matching on substring markers, no lookups. The order of the
checks matters: Edge and Chrome both advertise ``Safari/``, Chrome-based
Edge also advertises ``Chrome/``, and Android user agents contain ``Linux``.
"""

import re
from typing import NamedTuple, Optional
from urllib.parse import urlsplit

DIRECT = "Direct"
OTHER = "Other"

# (marker, browser name, version pattern)
_BROWSERS = (
    ("Edg/", "Edge", re.compile(r"Edg/(\d+)")),
    ("Chrome/", "Chrome", re.compile(r"Chrome/(\d+)")),
    ("Safari/", "Safari", re.compile(r"Version/(\d+)")),
    ("Firefox/", "Firefox", re.compile(r"Firefox/(\d+)")),
)


class UserAgentInfo(NamedTuple):
    browser: str
    browser_version: str
    os: str
    device_type: str


def detect_browser(ua: str) -> tuple:
    """Return ``(browser, major_version)``; version is "" when not present."""
    for marker, name, version_pattern in _BROWSERS:
        if marker not in ua:
            continue
        if name == "Chrome" and "Edg" in ua:
            continue
        if name == "Safari" and "Chrome" in ua:
            continue
        match = version_pattern.search(ua)
        return name, match.group(1) if match else ""
    return OTHER, ""


def detect_os(ua: str) -> str:
    if "Windows" in ua:
        return "Windows"
    # iOS user agents also say "like Mac OS X"
    if "iPhone" in ua or "iPad" in ua:
        return "iOS"
    if "Mac OS" in ua or "Macintosh" in ua:
        return "macOS"
    if "Linux" in ua and "Android" not in ua:
        return "Linux"
    if "Android" in ua:
        return "Android"
    return OTHER


def detect_device_type(ua: str) -> str:
    # Mobile wins over Tablet
    if "Mobile" in ua or "iPhone" in ua or ("Android" in ua and "Tablet" not in ua):
        return "Mobile"
    if "Tablet" in ua or "iPad" in ua:
        return "Tablet"
    return "Desktop"


def parse_user_agent(ua: Optional[str]) -> UserAgentInfo:
    """Classify a raw ``User-Agent`` header value."""
    ua = ua or ""
    browser, version = detect_browser(ua)
    return UserAgentInfo(
        browser=browser,
        browser_version=version,
        os=detect_os(ua),
        device_type=detect_device_type(ua),
    )


def extract_domain(url: str) -> str:
    """Hostname of ``url``, or ``url`` itself when it cannot be parsed."""
    try:
        parts = urlsplit(url)
        hostname = parts.hostname
    except ValueError:
        return url
    if not parts.scheme or not hostname:
        return url
    return hostname


def referrer_domain(referrer: Optional[str]) -> str:
    """Registrable domain for a ``Referer`` header, ``Direct`` when absent."""
    if not referrer or referrer == DIRECT:
        return DIRECT
    return extract_domain(referrer)
