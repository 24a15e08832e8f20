import pytest

from core.exceptions import DatabaseOperationError
from core.models import LOCATION_UNKNOWN
from core.supabase_adapter import SupabaseAlertStore


def _calls(query, name):
    return [args for call_name, args, _ in query.calls if call_name == name]


def test_default_sources_filter_and_skip_rows_without_url(fake_supabase_factory):
    client = fake_supabase_factory(rows={"rss_sources": [
        {"name": "ynet", "url": "https://www.ynet.co.il/rss", "is_default": True},
        {"name": "broken", "url": "", "is_default": True},
    ]})
    store = SupabaseAlertStore(client=client)

    sources = store.get_default_sources()

    assert [source.name for source in sources] == ["ynet"]
    query = client.queries[0]
    assert query.table == "rss_sources"
    assert _calls(query, "eq") == [("is_default", True)]


def test_recent_alert_keys_are_links_and_normalized_titles(fake_supabase_factory):
    client = fake_supabase_factory(rows={"alerts": [
        {"link": "L1", "title": "אזעקה בתל-אביב!"},
        {"link": "L2", "title": None},
    ]})
    store = SupabaseAlertStore(client=client)

    links, titles = store.get_recent_alert_keys(hours=6)

    assert links == {"L1", "L2"}
    assert titles == ["אזעקה בתלאביב"]
    query = client.queries[0]
    assert _calls(query, "select") == [("link, title",)]
    assert _calls(query, "gte")[0][0] == "created_at"


def test_store_alerts_inserts_rows(fake_supabase_factory, alert_factory):
    client = fake_supabase_factory()
    store = SupabaseAlertStore(client=client)
    alerts = [alert_factory(title="א"), alert_factory(title="ב", location="")]

    stored = store.store_alerts(alerts)

    assert stored == 2
    rows = _calls(client.queries[0], "insert")[0][0]
    assert [row["title"] for row in rows] == ["א", "ב"]
    assert rows[1]["location"] == LOCATION_UNKNOWN


def test_store_alerts_skips_empty_batch(fake_supabase_factory):
    client = fake_supabase_factory()

    assert SupabaseAlertStore(client=client).store_alerts([]) == 0
    assert client.queries == []


def test_push_recipients_require_token(fake_supabase_factory):
    client = fake_supabase_factory(rows={"profiles": [
        {"id": "u1", "fcm_token": "t1", "location": "חיפה"},
    ]})
    store = SupabaseAlertStore(client=client)

    recipients = store.get_push_recipients()

    assert recipients[0].user_id == "u1"
    assert recipients[0].raw_location == "חיפה"
    query = client.queries[0]
    assert _calls(query, "not_") == [()]
    assert _calls(query, "is_") == [("fcm_token", "null")]


def test_failures_become_database_errors(fake_supabase_factory, alert_factory):
    store = SupabaseAlertStore(client=fake_supabase_factory(error=RuntimeError("timeout")))

    with pytest.raises(DatabaseOperationError) as exc_info:
        store.store_alerts([alert_factory()])

    assert exc_info.value.context["operation"] == "insert"
    assert exc_info.value.context["table"] == "alerts"

    with pytest.raises(DatabaseOperationError):
        store.get_recent_alert_keys()


def test_stats_count_each_table(fake_supabase_factory):
    client = fake_supabase_factory(rows={"alerts": [{"id": 1}, {"id": 2}]})

    stats = SupabaseAlertStore(client=client).get_stats()

    assert stats == {"alerts": 2, "profiles": 0, "rss_sources": 0}
