"""
Suggestion Service

Clients for the word suggestion/validation lookup, plus the last-request-wins
wrapper the puzzle engine talks to.
"""

import threading
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional

import requests

from ..utils.game_logger import game_logger


@dataclass
class Suggestions:
    """Lookup result for one attempt text."""
    text: str
    exact_matches: List[str] = field(default_factory=list)
    dictionary_suggestions: List[str] = field(default_factory=list)
    tokenizer_suggestions: List[str] = field(default_factory=list)

    @property
    def is_recognized(self) -> bool:
        return bool(self.exact_matches)

    @property
    def display(self) -> Optional[str]:
        """First entry across exact, dictionary and tokenizer lists."""
        for candidates in (self.exact_matches, self.dictionary_suggestions, self.tokenizer_suggestions):
            if candidates:
                return candidates[0]
        return None


class SuggestionService:
    """Interface: ``fetch`` returns None when the lookup failed."""

    def fetch(self, text: str) -> Optional[Suggestions]:
        raise NotImplementedError


class HttpSuggestionService(SuggestionService):
    """
    Remote lookup over HTTP.

    Expects ``GET <url>?text=<attempt>`` to answer with
    ``{"exactMatches": [...], "dictionarySuggestions": [...], "tokenizerSuggestions": [...]}``.
    """

    def __init__(self, url: str, timeout: float = 5.0, session: Optional[requests.Session] = None):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch(self, text: str) -> Optional[Suggestions]:
        try:
            response = self.session.get(self.url, params={'text': text}, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            game_logger.logger.warning(f"Suggestion lookup failed for '{text}': {e}")
            return None

        if not isinstance(data, dict):
            game_logger.logger.warning(f"Suggestion lookup for '{text}' returned {type(data).__name__}")
            return None

        return Suggestions(
            text=text,
            exact_matches=_string_list(data.get('exactMatches')),
            dictionary_suggestions=_string_list(data.get('dictionarySuggestions')),
            tokenizer_suggestions=_string_list(data.get('tokenizerSuggestions')),
        )


class WordListSuggestionService(SuggestionService):
    """Offline lookup against a local word list: exact match plus prefix completions."""

    def __init__(self, words: Iterable[str], limit: int = 5):
        self.words = sorted({word.lower() for word in words})
        self._word_set = set(self.words)
        self.limit = limit

    def fetch(self, text: str) -> Optional[Suggestions]:
        text = text.lower()
        exact = [text] if text in self._word_set else []
        completions = [word for word in self.words if word.startswith(text) and word != text]
        return Suggestions(text=text, exact_matches=exact, dictionary_suggestions=completions[:self.limit])


def _string_list(value) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item]


class SuggestionLookup:
    """
    Last-request-wins wrapper around a suggestion service.

    Every ``request`` takes a new token; a finished lookup only reaches its
    callback if its token is still the latest. ``cancel`` invalidates any
    in-flight lookup without starting a new one.
    """

    def __init__(self, service: SuggestionService, asynchronous: bool = True):
        self.service = service
        self.asynchronous = asynchronous
        self._token = 0
        self._lock = threading.Lock()

    def _next_token(self) -> int:
        with self._lock:
            self._token += 1
            return self._token

    def is_current(self, token: int) -> bool:
        with self._lock:
            return token == self._token

    def request(self, text: str,
                on_result: Callable[[str, Optional[Suggestions]], None]) -> Optional[threading.Thread]:
        """
        Start a lookup for ``text``.

        Returns:
            The worker thread when running asynchronously, otherwise None
        """
        token = self._next_token()
        if not self.asynchronous:
            self._run(token, text, on_result)
            return None
        worker = threading.Thread(target=self._run, args=(token, text, on_result), daemon=True)
        worker.start()
        return worker

    def cancel(self):
        self._next_token()

    def resolve(self, text: str) -> Optional[Suggestions]:
        """Synchronous lookup that does not disturb the latest-request token."""
        return self._fetch(text)

    def _fetch(self, text: str) -> Optional[Suggestions]:
        try:
            return self.service.fetch(text)
        except Exception as e:
            # Any service failure means "validity unknown"
            game_logger.logger.warning(f"Suggestion service error for '{text}': {e}")
            return None

    def _run(self, token: int, text: str, on_result: Callable[[str, Optional[Suggestions]], None]):
        result = self._fetch(text)
        if not self.is_current(token):
            return
        on_result(text, result)
