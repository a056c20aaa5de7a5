"""HTTP client for the RL-Chat API, used by the Streamlit page.

``http`` is anything with requests-style ``get``/``post`` methods, a
``requests.Session`` by default.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests

from core.settings import SETTINGS

logger = logging.getLogger("rlchat.ui.client")

ERROR_REPLY = "Sorry, I encountered an error. Please check your API key."

# Local feedback marker: the server already holds a rating this client never saw.
ALREADY_RATED = 0


@dataclass
class ChatMessage:
    role: str
    content: str
    id: Optional[int] = None
    feedback: Optional[int] = None

    def to_turn(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}

    @property
    def rated(self) -> bool:
        return self.feedback is not None


@dataclass
class Stats:
    total_responses: int = 0
    positive: int = 0
    negative: int = 0

    @property
    def positive_ratio(self) -> float:
        if self.total_responses <= 0:
            return 0.0
        return min(self.positive / self.total_responses, 1.0)


@dataclass
class ExchangeResult:
    """Outcome of one send: the user turn plus the reply bubble to show."""

    user: ChatMessage
    reply: ChatMessage
    error: Optional[str] = None
    examples: List[Dict[str, str]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None


def mark_feedback(
    messages: List[ChatMessage], message_id: int, rating: int, recorded: bool
) -> None:
    for m in messages:
        if m.id == message_id:
            m.feedback = rating if recorded else ALREADY_RATED


class ChatApiClient:
    def __init__(
        self,
        base_url: str = SETTINGS.UI.API_BASE_URL,
        http: Any = None,
        timeout: float = 60,
    ):
        self.base_url = base_url.rstrip("/")
        self.http = http if http is not None else requests.Session()
        self.timeout = timeout

    def _url(self, endpoint: str) -> str:
        return f"{self.base_url}{endpoint}"

    def _post(self, endpoint: str, payload: Dict[str, Any]) -> Any:
        resp = self.http.post(self._url(endpoint), json=payload, timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()

    def _get(self, endpoint: str) -> Any:
        resp = self.http.get(self._url(endpoint), timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()

    def fetch_stats(self) -> Stats:
        data = self._get(SETTINGS.UI.ENDPOINT_STATS) or {}
        return Stats(
            total_responses=int(data.get("totalResponses", 0)),
            positive=int(data.get("positive", 0)),
            negative=int(data.get("negative", 0)),
        )

    def record_message(
        self, role: str, content: str, reply_to: Optional[int] = None
    ) -> int:
        payload: Dict[str, Any] = {"role": role, "content": content}
        if reply_to is not None:
            payload["replyTo"] = reply_to
        return int(self._post(SETTINGS.UI.ENDPOINT_MESSAGES, payload)["id"])

    def record_feedback(self, message_id: int, rating: int) -> bool:
        """Store a rating. Returns False if the message was already rated."""
        resp = self.http.post(
            self._url(SETTINGS.UI.ENDPOINT_FEEDBACK),
            json={"messageId": message_id, "rating": rating},
            timeout=self.timeout,
        )
        if resp.status_code == 409:
            logger.info(f"Message {message_id} already rated")
            return False
        resp.raise_for_status()
        return bool(resp.json().get("success"))

    def fetch_examples(self) -> List[Dict[str, str]]:
        return list(self._get(SETTINGS.UI.ENDPOINT_EXAMPLES) or [])

    def generate(
        self, history: List[ChatMessage], examples: List[Dict[str, str]]
    ) -> str:
        data = self._post(
            SETTINGS.UI.ENDPOINT_GENERATE,
            {"messages": [m.to_turn() for m in history], "examples": examples},
        )
        return str(data["content"])

    def exchange(self, history: List[ChatMessage], text: str) -> ExchangeResult:
        """Run one full turn: store the user turn, generate, store the reply.

        Any failure yields an apology bubble instead of raising, whichever
        HTTP client is in use. The user turn stays stored if it was written
        before the failure.
        """
        user = ChatMessage(role="user", content=text)
        try:
            user.id = self.record_message("user", text)
            examples = self.fetch_examples()
            content = self.generate([*history, user], examples)
            reply = ChatMessage(role="model", content=content)
            reply.id = self.record_message("model", content, reply_to=user.id)
        except Exception as e:
            logger.exception(f"Chat error: {e}")
            return ExchangeResult(
                user=user,
                reply=ChatMessage(role="model", content=ERROR_REPLY),
                error=str(e),
            )
        return ExchangeResult(user=user, reply=reply, examples=examples)
