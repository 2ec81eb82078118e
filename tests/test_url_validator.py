"""Tests for profile URL validation."""

from __future__ import annotations

import pytest

from resume_builder.errors import InvalidSource
from resume_builder.utils.url_validator import validate_profile_url


class TestValidateProfileUrl:
    @pytest.mark.parametrize(
        "url",
        [
            "https://www.linkedin.com/in/jane-smith",
            "https://linkedin.com/in/jane-smith/",
        ],
    )
    def test_accepts_linkedin(self, url):
        assert validate_profile_url(url) == url

    def test_strips_whitespace(self):
        assert (
            validate_profile_url("  https://www.linkedin.com/in/jane \n")
            == "https://www.linkedin.com/in/jane"
        )

    @pytest.mark.parametrize(
        "url",
        [
            "https://example.com/in/x",
            "http://www.linkedin.com/in/jane",
            "https://linkedin.com.attacker.io/in/jane",
            "https://uk.linkedin.com/in/jane",
            "https://www.linkedin.com",
            "file:///etc/passwd",
            "http://127.0.0.1/admin",
            "",
        ],
    )
    def test_rejects_other_hosts(self, url):
        with pytest.raises(InvalidSource, match="Invalid LinkedIn URL"):
            validate_profile_url(url)

    def test_none_is_rejected(self):
        with pytest.raises(InvalidSource):
            validate_profile_url(None)
