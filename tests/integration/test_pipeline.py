from core.classification import AlertClassifier
from core.exceptions import LLMError
from core.models import UserLocationProfile
from core.notifications import AlertNotificationDispatcher
from core.pipeline import AlertProcessingPipeline

SECURITY = {"is_security_event": True, "location": "חיפה"}


def _pipeline(store, parser, openai_client=None, push_client=None, sleep=None, **kwargs):
    classifier = AlertClassifier(ai_client=openai_client, sleep=sleep or (lambda _: None))
    dispatcher = AlertNotificationDispatcher(push_client) if push_client is not None else None
    return AlertProcessingPipeline(store=store, feed_parser=parser, classifier=classifier,
                                   dispatcher=dispatcher, **kwargs)


def test_no_new_items(fake_store_factory, fake_feed_parser_factory, item_factory):
    store = fake_store_factory(existing_links={"L1"})
    parser = fake_feed_parser_factory([item_factory("אזעקה בחיפה", "L1")])

    report = _pipeline(store, parser).run()

    assert report.success
    assert report.message == "No new alerts to process"
    assert store.window_requests == [24]


def test_no_security_alerts(fake_store_factory, fake_feed_parser_factory, fake_openai_client_factory,
                            item_factory):
    store = fake_store_factory()
    parser = fake_feed_parser_factory([item_factory("תחזית מזג האוויר", "L1")])

    report = _pipeline(store, parser, fake_openai_client_factory()).run()

    assert report.success
    assert report.message == "No security alerts found"
    assert store.stored == []


def test_full_run_stores_and_notifies(fake_store_factory, fake_feed_parser_factory, fake_openai_client_factory,
                                      fake_push_client, item_factory):
    store = fake_store_factory(
        existing_titles=["נשמעה אזעקה בנתניה"],
        recipients=[UserLocationProfile(user_id="u1", raw_location="חיפה", fcm_token="t")],
    )
    parser = fake_feed_parser_factory([
        item_factory("ירי בחיפה", "L1"),
        item_factory("נשמעה אזעקה בנתניה!", "L2"),
        item_factory("מזג אוויר", "L3"),
    ], failed=["walla"])
    client = fake_openai_client_factory({"ירי": SECURITY})

    report = _pipeline(store, parser, client, fake_push_client, existing_window_hours=12).run()

    assert report.success
    assert report.message == "Processed 1 new security alerts"
    assert report.items_fetched == 3
    assert report.items_after_dedup == 2
    assert report.failed_sources == ["walla"]
    assert [alert.link for alert in store.stored] == ["L1"]
    assert store.window_requests == [12]
    assert report.dispatch.notifications_sent == 1


def test_hours_override_window(fake_store_factory, fake_feed_parser_factory):
    store = fake_store_factory()

    _pipeline(store, fake_feed_parser_factory()).run(hours=3)

    assert store.window_requests == [3]


def test_insert_failure_fails_run(fake_store_factory, fake_feed_parser_factory, fake_openai_client_factory,
                                  item_factory):
    store = fake_store_factory(fail_on="insert")
    parser = fake_feed_parser_factory([item_factory("ירי בחיפה", "L1")])

    report = _pipeline(store, parser, fake_openai_client_factory({"ירי": SECURITY})).run()

    assert report.success is False
    assert "insert" in report.error
    assert report.to_dict()["error"] == report.error


def test_sources_failure_fails_run(fake_store_factory, fake_feed_parser_factory):
    report = _pipeline(fake_store_factory(fail_on="sources"), fake_feed_parser_factory()).run()

    assert report.success is False


def test_notify_disabled(fake_store_factory, fake_feed_parser_factory, fake_openai_client_factory,
                         fake_push_client, item_factory):
    store = fake_store_factory(recipients=[UserLocationProfile(user_id="u1", raw_location="חיפה")])
    parser = fake_feed_parser_factory([item_factory("ירי בחיפה", "L1")])

    report = _pipeline(store, parser, fake_openai_client_factory({"ירי": SECURITY}), fake_push_client).run(
        notify=False)

    assert report.processed == 1
    assert report.dispatch is None
    assert fake_push_client.notifications == []


def test_recipients_failure_keeps_run_successful(fake_store_factory, fake_feed_parser_factory,
                                                 fake_openai_client_factory, fake_push_client, item_factory):
    store = fake_store_factory(fail_on="recipients")
    parser = fake_feed_parser_factory([item_factory("ירי בחיפה", "L1")])

    report = _pipeline(store, parser, fake_openai_client_factory({"ירי": SECURITY}), fake_push_client).run()

    assert report.success
    assert report.processed == 1
    assert report.dispatch is None


def test_async_fetcher_used_when_requested(fake_store_factory, fake_feed_parser_factory, item_factory):
    calls = []

    def async_fetcher(sources):
        calls.append(list(sources))
        return [item_factory("ירי בחיפה", "L1")], []

    sync_parser = fake_feed_parser_factory()
    store = fake_store_factory()

    report = _pipeline(store, sync_parser, async_fetcher=async_fetcher).run(use_async=True)

    assert len(calls) == 1
    assert sync_parser.calls == []
    assert report.processed == 1


def test_keyword_fallbacks_are_counted(fake_store_factory, fake_feed_parser_factory, fake_openai_client_factory,
                                       item_factory):
    client = fake_openai_client_factory({"אזעקה": LLMError("openai", "gpt-4o-mini", RuntimeError("timeout"))})
    parser = fake_feed_parser_factory([item_factory("נשמעה אזעקה באשדוד", "L1")])
    store = fake_store_factory()

    report = _pipeline(store, parser, client).run()

    assert report.keyword_fallbacks == 1
    assert store.stored[0].location == "אשדוד"


def test_unexpected_push_error_keeps_run_successful(fake_store_factory, fake_feed_parser_factory,
                                                    fake_openai_client_factory, fake_push_client_factory,
                                                    item_factory, caplog):
    store = fake_store_factory(recipients=[UserLocationProfile(user_id="u1", raw_location="חיפה", fcm_token="t")])
    parser = fake_feed_parser_factory([item_factory("ירי בחיפה", "L1")])
    push_client = fake_push_client_factory(error=RuntimeError("socket closed"))

    report = _pipeline(store, parser, fake_openai_client_factory({"ירי": SECURITY}), push_client).run()

    assert report.success
    assert report.message == "Processed 1 new security alerts"
    assert [alert.link for alert in store.stored] == ["L1"]
    assert report.dispatch is None
    assert "Error dispatching notifications" in caplog.text
