"""
Tests for User-Agent and Referer classification.
"""
import pytest

from linkstats_app.analytics.classifier import extract_domain, parse_user_agent, referrer_domain
from conftest import CHROME_UA, FIREFOX_UA, IPHONE_UA

EDGE_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36 Edg/120.0.2210.91"
)
MAC_SAFARI_UA = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.1 Safari/605.1.15"
)
IPAD_UA = (
    "Mozilla/5.0 (iPad; CPU OS 17_0 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.0 Safari/604.1"
)
ANDROID_UA = (
    "Mozilla/5.0 (Linux; Android 14; Pixel 8) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Mobile Safari/537.36"
)


class TestParseUserAgent:
    """Test browser, OS and device detection"""

    def test_desktop_chrome(self):
        info = parse_user_agent(CHROME_UA)
        assert info.browser == "Chrome"
        assert info.browser_version == "120"
        assert info.os == "Windows"
        assert info.device_type == "Desktop"

    def test_iphone_safari(self):
        info = parse_user_agent(IPHONE_UA)
        assert info.browser == "Safari"
        assert info.browser_version == "17"
        assert info.os == "iOS"
        assert info.device_type == "Mobile"

    def test_edge_wins_over_chrome(self):
        info = parse_user_agent(EDGE_UA)
        assert info.browser == "Edge"
        assert info.browser_version == "120"

    def test_mac_safari(self):
        info = parse_user_agent(MAC_SAFARI_UA)
        assert (info.browser, info.os, info.device_type) == ("Safari", "macOS", "Desktop")

    def test_linux_firefox(self):
        info = parse_user_agent(FIREFOX_UA)
        assert (info.browser, info.browser_version, info.os) == ("Firefox", "121", "Linux")

    def test_ipad_is_tablet(self):
        info = parse_user_agent(IPAD_UA)
        assert info.os == "iOS"
        assert info.device_type == "Tablet"

    def test_android_phone(self):
        info = parse_user_agent(ANDROID_UA)
        assert info.os == "Android"
        assert info.device_type == "Mobile"

    def test_android_tablet(self):
        info = parse_user_agent("Mozilla/5.0 (Linux; Android 13; Tablet) Firefox/120.0")
        assert info.device_type == "Tablet"

    @pytest.mark.parametrize("ua", ["", None, "curl/8.4.0"])
    def test_unknown_agents(self, ua):
        info = parse_user_agent(ua)
        assert info.browser == "Other"
        assert info.browser_version == ""
        assert info.os == "Other"
        assert info.device_type == "Desktop"


class TestReferrerDomain:
    """Test referrer domain extraction"""

    def test_absent_is_direct(self):
        assert referrer_domain(None) == "Direct"
        assert referrer_domain("") == "Direct"
        assert referrer_domain("Direct") == "Direct"

    def test_hostname_extracted(self):
        assert referrer_domain("https://www.google.com/search?q=x") == "www.google.com"
        assert referrer_domain("http://Twitter.com:443/a") == "twitter.com"

    def test_unparsable_returned_unchanged(self):
        assert extract_domain("not a url") == "not a url"
        assert extract_domain("http://[broken") == "http://[broken"
