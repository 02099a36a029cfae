"""
Tests for short code generation, validation and allocation.
"""
import asyncio
import re

import pytest

from linkstats_app.errors import ConflictError, ShortCodeExhaustedError, ValidationError
from linkstats_app.schemas.url import UrlRecord
from linkstats_app.services import short_code as short_code_module
from linkstats_app.services.short_code import (
    CollisionPolicy,
    ShortCodeAllocator,
    generate_short_code,
    is_valid_alias,
    is_valid_url,
)
from linkstats_app.storage.strategies import InMemoryStorage


class TestGenerateShortCode:
    """Test random code generation"""

    def test_default_length(self):
        assert len(generate_short_code()) == 6

    def test_custom_length(self):
        assert len(generate_short_code(10)) == 10

    def test_only_alphanumeric(self):
        code = generate_short_code(200)
        assert re.fullmatch(r"[A-Za-z0-9]+", code)

    def test_codes_are_distinct(self):
        """With 62^6 possibilities, 100 codes should be unique"""
        codes = {generate_short_code() for _ in range(100)}
        assert len(codes) == 100


class TestValidators:
    """Test alias and URL validation"""

    @pytest.mark.parametrize("alias", ["abc", "my-link", "my_link", "MyLink123", "a" * 20, "1_2"])
    def test_valid_aliases(self, alias):
        assert is_valid_alias(alias)

    @pytest.mark.parametrize("alias", ["", "ab", "a" * 21, "my link", "my.link", "my@link", "my/link"])
    def test_invalid_aliases(self, alias):
        assert not is_valid_alias(alias)

    @pytest.mark.parametrize("url", [
        "https://example.com",
        "http://example.com/path?query=value",
        "http://localhost:3000",
        "https://example.com/page#section",
        "ftp://files.example.com",
        "file:///path/to/file",
    ])
    def test_valid_urls(self, url):
        assert is_valid_url(url)

    @pytest.mark.parametrize("url", ["not a url", "", "example.com", "://example.com", "http://"])
    def test_invalid_urls(self, url):
        assert not is_valid_url(url)


class TestShortCodeAllocator:
    """Test alias and collision handling"""

    def test_alias_used_verbatim(self):
        storage = InMemoryStorage()
        code = asyncio.run(ShortCodeAllocator().allocate(storage, "my-alias"))
        assert code == "my-alias"

    def test_invalid_alias_rejected(self):
        storage = InMemoryStorage()
        with pytest.raises(ValidationError):
            asyncio.run(ShortCodeAllocator().allocate(storage, "a b"))

    def test_existing_alias_conflicts(self):
        storage = InMemoryStorage()
        asyncio.run(storage.put_url(UrlRecord(short_code="taken", original_url="https://a.com")))

        with pytest.raises(ConflictError):
            asyncio.run(ShortCodeAllocator().allocate(storage, "taken"))

    def test_random_code_retries_on_collision(self, monkeypatch):
        """First two codes exist, the third is free"""
        storage = InMemoryStorage()
        for code in ("AAAAAA", "BBBBBB"):
            asyncio.run(storage.put_url(UrlRecord(short_code=code, original_url="https://a.com")))
        codes = iter(["AAAAAA", "BBBBBB", "CCCCCC"])
        monkeypatch.setattr(short_code_module, "generate_short_code", lambda length=6: next(codes))

        code = asyncio.run(ShortCodeAllocator().allocate(storage))

        assert code == "CCCCCC"

    def test_proceeds_after_max_attempts(self, monkeypatch):
        """Default policy keeps the last generated code"""
        storage = InMemoryStorage()
        asyncio.run(storage.put_url(UrlRecord(short_code="AAAAAA", original_url="https://a.com")))
        monkeypatch.setattr(short_code_module, "generate_short_code", lambda length=6: "AAAAAA")

        allocator = ShortCodeAllocator(max_attempts=5)
        code = asyncio.run(allocator.allocate(storage))

        assert code == "AAAAAA"

    def test_fail_policy_raises(self, monkeypatch):
        storage = InMemoryStorage()
        asyncio.run(storage.put_url(UrlRecord(short_code="AAAAAA", original_url="https://a.com")))
        calls = []

        def always_taken(length=6):
            calls.append(length)
            return "AAAAAA"

        monkeypatch.setattr(short_code_module, "generate_short_code", always_taken)

        allocator = ShortCodeAllocator(max_attempts=5, collision_policy=CollisionPolicy.FAIL)
        with pytest.raises(ShortCodeExhaustedError):
            asyncio.run(allocator.allocate(storage))
        assert len(calls) == 5
