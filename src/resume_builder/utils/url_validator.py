"""Validation for profile URLs handed to the headless browser.

Only public LinkedIn pages are accepted. Because the host is pinned to
linkedin.com, user-supplied URLs never point the browser at internal network
addresses.
"""

from __future__ import annotations

import re

from resume_builder.errors import InvalidSource

PROFILE_URL_PATTERN = re.compile(r"^https://(www\.)?linkedin\.com/")


def validate_profile_url(url: str) -> str:
    """Return the stripped URL if it targets a LinkedIn page.

    Raises InvalidSource otherwise.
    """
    url = (url or "").strip()
    if not PROFILE_URL_PATTERN.match(url):
        raise InvalidSource(f"Invalid LinkedIn URL: {url!r}")
    return url
