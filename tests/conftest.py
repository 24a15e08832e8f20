import sys
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Callable, Dict, Iterable, List, Optional, Set, Tuple

import pytest
import requests

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

# Also add the project root to handle absolute imports
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from core.deduplication import normalize_text  # noqa: E402
from core.exceptions import DatabaseOperationError  # noqa: E402
from core.models import Alert, FeedItem, FeedSource, UserLocationProfile  # noqa: E402


class FakeAlertStore:
    def __init__(
        self,
        sources: Optional[List[FeedSource]] = None,
        existing_links: Optional[Set[str]] = None,
        existing_titles: Optional[List[str]] = None,
        recipients: Optional[List[UserLocationProfile]] = None,
        fail_on: Optional[str] = None,
    ) -> None:
        self.sources = sources if sources is not None else [FeedSource("ynet", "https://www.ynet.co.il/rss")]
        self.existing_links = set(existing_links or ())
        self.existing_titles = [normalize_text(t) for t in existing_titles or ()]
        self.recipients = recipients or []
        self.fail_on = fail_on
        self.stored: List[Alert] = []
        self.window_requests: List[int] = []

    def _maybe_fail(self, operation: str, table: str) -> None:
        if self.fail_on == operation:
            raise DatabaseOperationError(operation, table, RuntimeError("connection reset"))

    def get_default_sources(self) -> List[FeedSource]:
        self._maybe_fail("sources", "rss_sources")
        return self.sources

    def get_recent_alert_keys(self, hours: int = 24) -> Tuple[Set[str], List[str]]:
        self.window_requests.append(hours)
        return set(self.existing_links), list(self.existing_titles)

    def store_alerts(self, alerts: List[Alert]) -> int:
        self._maybe_fail("insert", "alerts")
        self.stored.extend(alerts)
        return len(alerts)

    def get_recent_alerts(self, hours: int = 24, limit: int = 100) -> List[Alert]:
        return list(self.stored)

    def get_push_recipients(self) -> List[UserLocationProfile]:
        self._maybe_fail("recipients", "profiles")
        return self.recipients


class FakeFeedParser:
    def __init__(self, items: Optional[List[FeedItem]] = None, failed: Optional[List[str]] = None) -> None:
        self.items = items or []
        self.failed = failed or []
        self.calls: List[List[FeedSource]] = []

    def fetch_all(self, sources: Iterable[FeedSource]) -> Tuple[List[FeedItem], List[str]]:
        self.calls.append(list(sources))
        return list(self.items), list(self.failed)


class FakeOpenAIClient:
    """Answers by the first registered title fragment found in the text."""

    def __init__(self, responses: Optional[Dict[str, Any]] = None, default: Optional[Dict[str, Any]] = None) -> None:
        self.responses = responses or {}
        self.default = default or {"is_security_event": False, "location": None}
        self.calls: List[str] = []

    def classify_security_event(self, text: str) -> Dict[str, Any]:
        self.calls.append(text)
        for fragment, response in self.responses.items():
            if fragment in text:
                if isinstance(response, Exception):
                    raise response
                return response
        return self.default


class FakePushClient:
    def __init__(self, succeed: bool = True, error: Optional[Exception] = None) -> None:
        self.succeed = succeed
        self.error = error
        self.notifications: List[Dict[str, Any]] = []

    def send(self, recipient: UserLocationProfile, title: str, body: str,
             data: Optional[Dict[str, Any]] = None) -> bool:
        self.notifications.append({"user_id": recipient.user_id, "title": title, "body": body, "data": data})
        if self.error is not None:
            raise self.error
        return self.succeed


class FakeResponse:
    def __init__(self, status_code: int = 200, content: bytes = b"", text: str = "") -> None:
        self.status_code = status_code
        self.content = content
        self.text = text

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


class FakeSession:
    def __init__(self, responses: Optional[Dict[str, Any]] = None, post_response: Any = None) -> None:
        self.headers: Dict[str, str] = {}
        self.responses = responses or {}
        self.post_response = post_response if post_response is not None else FakeResponse(200)
        self.gets: List[str] = []
        self.posts: List[Dict[str, Any]] = []

    def get(self, url: str, timeout: Optional[int] = None) -> FakeResponse:
        self.gets.append(url)
        response = self.responses.get(url, FakeResponse(404))
        if isinstance(response, Exception):
            raise response
        return response

    def post(self, url: str, json: Optional[Dict[str, Any]] = None, headers: Optional[Dict[str, str]] = None,
             timeout: Optional[int] = None) -> FakeResponse:
        self.posts.append({"url": url, "json": json, "headers": headers})
        if isinstance(self.post_response, Exception):
            raise self.post_response
        return self.post_response


class FakeQuery:
    def __init__(self, client: "FakeSupabaseClient", table: str) -> None:
        self.client = client
        self.table = table
        self.calls: List[Tuple[str, tuple, dict]] = []

    def _record(self, name: str, *args, **kwargs) -> "FakeQuery":
        self.calls.append((name, args, kwargs))
        return self

    def select(self, *args, **kwargs) -> "FakeQuery":
        return self._record("select", *args, **kwargs)

    def insert(self, *args, **kwargs) -> "FakeQuery":
        return self._record("insert", *args, **kwargs)

    def eq(self, *args, **kwargs) -> "FakeQuery":
        return self._record("eq", *args, **kwargs)

    def gte(self, *args, **kwargs) -> "FakeQuery":
        return self._record("gte", *args, **kwargs)

    def order(self, *args, **kwargs) -> "FakeQuery":
        return self._record("order", *args, **kwargs)

    def limit(self, *args, **kwargs) -> "FakeQuery":
        return self._record("limit", *args, **kwargs)

    def is_(self, *args, **kwargs) -> "FakeQuery":
        return self._record("is_", *args, **kwargs)

    @property
    def not_(self) -> "FakeQuery":
        return self._record("not_")

    def execute(self) -> SimpleNamespace:
        if self.client.error is not None:
            raise self.client.error
        for name, args, _ in self.calls:
            if name == "insert":
                return SimpleNamespace(data=list(args[0]), count=None)
        rows = self.client.rows.get(self.table, [])
        return SimpleNamespace(data=rows, count=len(rows))


class FakeSupabaseClient:
    def __init__(self, rows: Optional[Dict[str, List[Dict[str, Any]]]] = None,
                 error: Optional[Exception] = None) -> None:
        self.rows = rows or {}
        self.error = error
        self.queries: List[FakeQuery] = []

    def table(self, name: str) -> FakeQuery:
        query = FakeQuery(self, name)
        self.queries.append(query)
        return query


def make_item(title: str, link: str, description: str = "אין פרטים נוספים",
              pub_date: str = "2024-01-01T10:00:00+00:00") -> FeedItem:
    return FeedItem(title=title, link=link, description=description, pub_date=pub_date, guid=link)


def make_alert(title: str = "נשמעה אזעקה", location: str = "חיפה",
               timestamp: str = "2024-01-01T10:00:00+00:00", **kwargs: Any) -> Alert:
    defaults = dict(description="אין פרטים נוספים", source="ynet",
                    link="https://www.ynet.co.il/1", is_security_event=True)
    defaults.update(kwargs)
    return Alert(title=title, location=location, timestamp=timestamp, **defaults)


@pytest.fixture
def item_factory() -> Callable[..., FeedItem]:
    return make_item


@pytest.fixture
def alert_factory() -> Callable[..., Alert]:
    return make_alert


@pytest.fixture
def fake_store_factory():
    def _factory(**kwargs: Any) -> FakeAlertStore:
        return FakeAlertStore(**kwargs)

    return _factory


@pytest.fixture
def fake_openai_client_factory():
    def _factory(responses: Optional[Dict[str, Any]] = None,
                 default: Optional[Dict[str, Any]] = None) -> FakeOpenAIClient:
        return FakeOpenAIClient(responses, default)

    return _factory


@pytest.fixture
def fake_push_client() -> FakePushClient:
    return FakePushClient()


@pytest.fixture
def no_sleep():
    calls: List[float] = []

    def _sleep(seconds: float) -> None:
        calls.append(seconds)

    _sleep.calls = calls
    return _sleep


@pytest.fixture
def fake_feed_parser_factory():
    def _factory(items: Optional[List[FeedItem]] = None, failed: Optional[List[str]] = None) -> FakeFeedParser:
        return FakeFeedParser(items, failed)

    return _factory


@pytest.fixture
def fake_push_client_factory():
    def _factory(succeed: bool = True, error: Optional[Exception] = None) -> FakePushClient:
        return FakePushClient(succeed, error)

    return _factory


@pytest.fixture
def fake_response_factory():
    def _factory(status_code: int = 200, content: bytes = b"", text: str = "") -> FakeResponse:
        return FakeResponse(status_code, content, text)

    return _factory


@pytest.fixture
def fake_session_factory():
    def _factory(responses: Optional[Dict[str, Any]] = None, post_response: Any = None) -> FakeSession:
        return FakeSession(responses, post_response)

    return _factory


@pytest.fixture
def fake_supabase_factory():
    def _factory(rows: Optional[Dict[str, List[Dict[str, Any]]]] = None,
                 error: Optional[Exception] = None) -> FakeSupabaseClient:
        return FakeSupabaseClient(rows, error)

    return _factory
