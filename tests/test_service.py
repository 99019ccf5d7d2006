import asyncio
from datetime import date, timedelta

import requests

from conftest import FakeResponse
from src.substitution.dates import encode_date
from src.substitution.errors import ApiError, ConfigurationError, ParseError, TransportError
from src.substitution.models import QueryOptions
from src.substitution.service import retrieve_timetable

IDENTITY = {"school_name": "Test School", "format_name": "Fmt", "department_ids": [1]}

PAYLOAD = {
    "payload": {
        "rows": [
            {"group": "11a", "data": ["1", "M", "101", "ABC", ""]},
            {"group": "12", "data": ["2", "D", "102", "DEF", ""]},
            {"group": "11a", "data": ["3", "E", "103", "GHI", "<b>moved</b>"]},
        ],
        "absentElements": [{"elementName": "DEF", "absences": [{"type": "ill"}]}],
        "lastUpdate": "07:45",
    }
}


def _retrieve(identity=IDENTITY, options=None):
    return asyncio.run(retrieve_timetable(identity, options))


def test_end_to_end_tomorrow_filtered_by_class(fake_post):
    fake_post.response = FakeResponse(200, PAYLOAD)

    result = _retrieve(options={"date_offset": 1, "filter_groups": ["11a"]})

    assert result.ok
    tomorrow = date.today() + timedelta(days=1)
    body = fake_post[0]["json"]
    assert body["date"] == encode_date(tomorrow)
    assert body["dateOffset"] == 1
    assert body["schoolName"] == "Test School"
    assert fake_post[0]["url"].endswith("?school=Test%20School")
    assert [row.group for row in result.payload.rows] == ["11a", "11a"]
    assert [e.element_name for e in result.payload.absent_elements] == ["DEF"]


def test_without_filter_all_rows_are_returned(fake_post):
    fake_post.response = FakeResponse(200, PAYLOAD)

    result = _retrieve(options=QueryOptions(target_date=date(2025, 5, 21)))

    assert fake_post[0]["json"]["date"] == 20250521
    assert [row.group for row in result.payload.rows] == ["11a", "12", "11a"]


def test_api_error_in_200_body_is_a_failed_result(fake_post):
    fake_post.response = FakeResponse(200, {"error": {"code": -1, "message": "not found"}})

    result = _retrieve()

    assert not result.ok
    assert result.payload is None
    assert isinstance(result.error, ApiError)
    assert result.error.code == -1
    assert not result.transient


def test_http_error_is_a_transient_failed_result(fake_post):
    fake_post.response = FakeResponse(500, text="Internal Server Error")

    result = _retrieve()

    assert isinstance(result.error, TransportError)
    assert result.error.body_text == "Internal Server Error"
    assert result.transient


def test_connection_error_is_a_failed_result(fake_post):
    fake_post.response = requests.Timeout("read timed out")

    result = _retrieve()

    assert isinstance(result.error, TransportError)
    assert isinstance(result.error.__cause__, requests.Timeout)


def test_unparsable_body_is_a_failed_result(fake_post):
    fake_post.response = FakeResponse(200, text="not json")

    assert isinstance(_retrieve().error, ParseError)


def test_missing_identity_fails_before_any_request(fake_post):
    result = _retrieve(identity={"school_name": "Test School", "format_name": ""})

    assert isinstance(result.error, ConfigurationError)
    assert fake_post == []


def test_invalid_options_fail_before_any_request(fake_post):
    result = _retrieve(options={"number_of_days": -1})

    assert isinstance(result.error, ConfigurationError)
    assert fake_post == []


def test_concurrent_retrievals_are_independent(fake_post):
    fake_post.response = FakeResponse(200, PAYLOAD)

    async def both():
        return await asyncio.gather(
            retrieve_timetable(IDENTITY, {"filter_groups": ["11a"]}),
            retrieve_timetable(IDENTITY, {"filter_groups": ["12"]}),
        )

    first, second = asyncio.run(both())

    assert [row.group for row in first.payload.rows] == ["11a", "11a"]
    assert [row.group for row in second.payload.rows] == ["12"]
    assert len(fake_post) == 2


def test_offset_outside_date_range_is_a_failed_result(fake_post):
    result = _retrieve(options={"date_offset": 10**7})

    assert isinstance(result.error, ConfigurationError)
    assert result.payload is None
    assert fake_post == []


def test_empty_error_object_next_to_payload_is_a_failed_result(fake_post):
    fake_post.response = FakeResponse(200, {"error": {}, "payload": {"rows": []}})

    result = _retrieve()

    assert not result.ok
    assert isinstance(result.error, ApiError)
