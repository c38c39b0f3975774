"""Upstream identities and the news editions that map onto them.

An identity names an independent rate-limit quota. Identities are fixed at
import time; the limiter rejects anything outside this set.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from pydantic import SecretStr

from news_gateway.core.config import UpstreamSettings


class UpstreamIdentity(str, enum.Enum):
    TELUGU = "telugu"
    TELUGUTWO = "telugutwo"
    ENGLISH = "english"
    SEARCH = "search"
    REWRITE = "rewrite"
    TOPNEWS = "topnews"


ALL_IDENTITIES: tuple[str, ...] = tuple(identity.value for identity in UpstreamIdentity)


@dataclass(frozen=True)
class Edition:
    """A language edition served by ``GET /{name}/news``."""

    name: str
    identity: UpstreamIdentity
    language: str
    credential_field: str

    def api_key(self, upstream: UpstreamSettings) -> SecretStr | None:
        return getattr(upstream, self.credential_field)


EDITIONS: dict[str, Edition] = {
    "telugu": Edition("telugu", UpstreamIdentity.TELUGU, "te", "telugu_api_key"),
    "telugutwo": Edition("telugutwo", UpstreamIdentity.TELUGUTWO, "te", "telugutwo_api_key"),
    "english": Edition("english", UpstreamIdentity.ENGLISH, "en", "english_api_key"),
}

DEFAULT_SEARCH_LANGUAGE = "te"
