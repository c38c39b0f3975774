"""Test doubles shared by the test modules."""

from __future__ import annotations

from typing import Any

import httpx

from news_gateway.adapters.llm.base import AbstractLLMClient


class FakeClock:
    """Deterministic, manually advanced time source."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.current = start

    def __call__(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds


class FakeUpstream:
    """Records outbound requests and answers them from a route table.

    ``routes`` maps a URL path to a callable taking the request and returning
    a fresh ``httpx.Response``.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.routes: dict[str, Any] = {}

    def calls_to(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        answer = self.routes.get(request.url.path)
        if answer is None:
            return httpx.Response(404, json={"status": "error"})
        return answer(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


class FakeLLM(AbstractLLMClient):
    """LLM double returning a canned reply and recording prompts."""

    def __init__(self, reply: dict[str, Any] | None = None, error: Exception | None = None) -> None:
        self.reply = reply if reply is not None else {"title": "Rewritten", "content": "Rewritten body."}
        self.error = error
        self.prompts: list[str] = []

    async def generate_json(self, prompt: str, *, system: str | None = None, **kwargs: Any) -> dict[str, Any]:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


ARTICLE_HTML = """
<html>
  <head>
    <title>Site | Fallback title</title>
    <meta property="og:title" content="Monsoon arrives early in Hyderabad">
    <script>var tracking = "ignore me please, not article text";</script>
  </head>
  <body>
    <nav><p>Home | World | Sports | Entertainment | Contact</p></nav>
    <article>
      <h1>Monsoon arrives early</h1>
      <p>The southwest monsoon reached Hyderabad three days ahead of schedule.</p>
      <p>Officials said rainfall would continue through the weekend across the state.</p>
      <p>Short.</p>
    </article>
    <footer><p>Copyright 2024 Example News. All rights reserved.</p></footer>
  </body>
</html>
"""
