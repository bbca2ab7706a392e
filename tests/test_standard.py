from datetime import datetime, timezone

import pytest

from conftest import FakeResponse
from mtgsdk.exceptions import DecodeError
from mtgsdk.models import Card
from mtgsdk.standard import (
    FormatWindow,
    FormatWindowClient,
    standard_cards,
    standard_set_codes,
    standard_set_names,
    standard_sets,
)

STANDARD_URL = "https://formats.example.com/standard.json"
NOW = datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)

WINDOWS = {
    "deprecated": False,
    "sets": [
        {"name": "Rotated", "code": "OLD", "enterDate": {"exact": "2015-10-02T00:00:00.000Z"}, "exitDate": {"exact": "2017-09-29T00:00:00.000Z"}},
        {"name": "Current", "code": "CUR", "enterDate": {"exact": "2024-01-01T00:00:00.000Z", "rough": "Q1 2024"}, "exitDate": {"exact": None, "rough": "Q1 2027"}},
        {"name": "Announced", "code": "NEW", "enterDate": {"exact": None, "rough": "Q1 2027"}, "exitDate": {"exact": None}},
        {"name": "Legacy Shape", "code": "LEG", "enter_date": "2025-06-01", "exit_date": ""},
        {"name": "Just Left", "code": "GON", "enterDate": "2023-02-01T00:00:00Z", "exitDate": "2026-10-01T00:00:00Z"},
        {"name": "No Code", "code": None, "enterDate": "2024-01-01T00:00:00Z"},
    ],
}


@pytest.fixture
def format_client() -> FormatWindowClient:
    return FormatWindowClient(url=STANDARD_URL, timeout=5)


def test_window_requires_past_enter_date_and_open_or_future_exit():
    assert FormatWindow(enter_date="2024-01-01T00:00:00Z").is_active(NOW)
    assert FormatWindow(enter_date="2024-01-01", exit_date="2027-01-01").is_active(NOW)
    assert not FormatWindow().is_active(NOW)
    assert not FormatWindow(enter_date="2027-01-01").is_active(NOW)
    assert not FormatWindow(enter_date="2020-01-01", exit_date="2026-01-01").is_active(NOW)


def test_window_accepts_naive_now():
    window = FormatWindow(enter_date="2024-01-01T00:00:00Z")
    assert window.is_active(datetime(2026, 1, 1))


def test_standard_set_codes_filters_by_window(format_client, fake_server):
    fake_server.add(STANDARD_URL, FakeResponse(WINDOWS))

    assert standard_set_codes(format_client, NOW) == ["CUR", "LEG"]
    assert fake_server.timeouts == [5]


def test_fetch_windows_accepts_bare_list(format_client, fake_server):
    fake_server.add(STANDARD_URL, FakeResponse([{"code": "CUR", "enter_date": "2024-01-01"}]))

    windows = format_client.fetch_windows()

    assert [window.code for window in windows] == ["CUR"]


@pytest.mark.parametrize(
    "payload",
    [{"sets": "nope"}, {"sets": [{"code": "BAD", "enterDate": "yesterday"}]}, "text"],
)
def test_fetch_windows_rejects_unexpected_payloads(format_client, fake_server, payload):
    fake_server.add(STANDARD_URL, FakeResponse(payload))

    with pytest.raises(DecodeError):
        format_client.fetch_windows()


def test_standard_sets_fetches_each_active_set(client, format_client, fake_server):
    fake_server.add(STANDARD_URL, FakeResponse(WINDOWS))
    fake_server.add(client.build_url("sets/CUR"), FakeResponse({"set": {"code": "CUR", "name": "Current"}}))
    fake_server.add(client.build_url("sets/LEG"), FakeResponse({"set": {"code": "LEG", "name": "Legacy Shape"}}))

    sets = standard_sets(client, format_client, NOW)

    assert [str(item) for item in sets] == ["Current (CUR)", "Legacy Shape (LEG)"]


def test_standard_cards_queries_all_active_sets(client, format_client, fake_server):
    fake_server.add(STANDARD_URL, FakeResponse(WINDOWS))
    fake_server.add(
        client.build_url("cards", {"set": "CUR|LEG"}),
        FakeResponse({"cards": [{"name": "A", "set": "CUR", "setName": "Current"}, {"name": "B", "set": "LEG", "setName": "Legacy Shape"}]}),
    )

    cards = standard_cards(client, format_client, NOW)

    assert [card.name for card in cards] == ["A", "B"]


def test_standard_cards_without_active_sets_skips_catalog(client, format_client, fake_server):
    fake_server.add(STANDARD_URL, FakeResponse({"sets": []}))

    assert standard_cards(client, format_client, NOW) == []
    assert fake_server.requested == [STANDARD_URL]


def test_standard_set_names_maps_names_to_codes():
    cards = [
        Card(name="A", set_code="CUR", set_name="Current"),
        Card(name="B", set_code="CUR", set_name="Current"),
        Card(name="C", set_code="LEG", set_name="Legacy Shape"),
    ]
    assert standard_set_names(cards) == {"Current": "CUR", "Legacy Shape": "LEG"}
