"""
Tests for decoding and fetching the album stream.
"""

import json

import aiohttp
import pytest
from aioresponses import aioresponses

from icloud_album.api.partition import get_endpoint
from icloud_album.api.stream import StreamMetadataFetcher, decode_stream_payload
from icloud_album.api.transport import HttpResult, make_timeout
from icloud_album.exceptions import SchemaError, StatusError
from tests.conftest import STREAM_URL, TOKEN


class TestDecodeStreamPayload:
    def test_metadata_fields(self, stream_payload):
        metadata, photos = decode_stream_payload(stream_payload)

        assert metadata.stream_name == "Summer Trip"
        assert metadata.owner_name == "Ada Lovelace"
        assert metadata.stream_ctag == "FT;42"
        assert metadata.items_returned == 2
        assert len(photos) == 2

    @pytest.mark.parametrize(
        "raw, expected", [(5, 5), ("5", 5), ("abc", 0), ("", 0), (None, 0), (-1, 0)]
    )
    def test_items_returned_is_lenient(self, raw, expected):
        metadata, _ = decode_stream_payload({"streamName": "x", "itemsReturned": raw})
        assert metadata.items_returned == expected

    def test_missing_stream_name_is_rejected(self):
        with pytest.raises(SchemaError, match="streamName"):
            decode_stream_payload({"photos": []})

    @pytest.mark.parametrize("name", ["", None, 42])
    def test_unusable_stream_name_is_rejected(self, name):
        with pytest.raises(SchemaError):
            decode_stream_payload({"streamName": name})

    def test_non_object_payload_is_rejected(self):
        with pytest.raises(SchemaError):
            decode_stream_payload(["streamName"])

    def test_optional_fields_default(self):
        metadata, photos = decode_stream_payload({"streamName": "Bare"})

        assert metadata.owner_name == ""
        assert metadata.stream_ctag == ""
        assert metadata.items_returned == 0
        assert photos == []

    def test_photo_order_is_preserved(self):
        payload = {
            "streamName": "x",
            "photos": [{"photoGuid": g} for g in ["c", "a", "b"]],
        }
        _, photos = decode_stream_payload(payload)
        assert [p.photo_guid for p in photos] == ["c", "a", "b"]

    def test_unknown_fields_are_ignored(self, stream_payload):
        stream_payload["brandNewField"] = {"nested": True}
        stream_payload["photos"][0]["contributorFullName"] = "Ada"
        _, photos = decode_stream_payload(stream_payload)
        assert photos[0].photo_guid == "GUID-1"

    def test_numeric_strings_in_photos_and_derivatives(self, stream_payload):
        _, photos = decode_stream_payload(stream_payload)
        photo = photos[0]

        assert (photo.width, photo.height) == (4032, 3024)
        assert photo.derivatives["PosterFrame"].file_size == 1024
        assert photo.derivatives["1"].width == 320
        assert photo.derivatives["original"].file_size == 2500000
        assert photo.derivatives["PosterFrame"].width is None

    def test_unparseable_dimension_becomes_unknown(self):
        payload = {
            "streamName": "x",
            "photos": [
                {
                    "photoGuid": "g",
                    "derivatives": {"1": {"checksum": "c", "width": "wide"}},
                }
            ],
        }
        _, photos = decode_stream_payload(payload)
        assert photos[0].derivatives["1"].width is None

    @pytest.mark.parametrize("guid", [None, "", 42])
    def test_photo_without_guid_keeps_its_position(self, guid):
        orphan = {"caption": "orphan"}
        if guid is not None:
            orphan["photoGuid"] = guid
        payload = {
            "streamName": "x",
            "photos": [{"photoGuid": "first"}, orphan, {"photoGuid": "last"}],
        }
        _, photos = decode_stream_payload(payload)

        assert [p.photo_guid for p in photos] == ["first", "", "last"]
        assert photos[1].caption == "orphan"

    def test_non_object_photo_is_skipped(self):
        payload = {"streamName": "x", "photos": ["junk", {"photoGuid": "kept"}]}
        _, photos = decode_stream_payload(payload)
        assert [p.photo_guid for p in photos] == ["kept"]

    def test_malformed_derivative_is_dropped(self):
        payload = {
            "streamName": "x",
            "photos": [
                {
                    "photoGuid": "g",
                    "derivatives": {"1": "broken", "2": {"checksum": "ok"}},
                }
            ],
        }
        _, photos = decode_stream_payload(payload)
        assert list(photos[0].derivatives) == ["2"]

    def test_derivatives_start_without_urls(self, stream_payload):
        _, photos = decode_stream_payload(stream_payload)
        for photo in photos:
            assert all(d.url is None for d in photo.derivatives.values())


class TestStreamMetadataFetcher:
    @pytest.mark.asyncio
    async def test_fetches_and_retries(self, stream_payload, fast_executor):
        with aioresponses() as mocked:
            mocked.post(STREAM_URL, status=503)
            mocked.post(STREAM_URL, status=200, payload=stream_payload)
            async with aiohttp.ClientSession() as session:
                fetcher = StreamMetadataFetcher(session, fast_executor, make_timeout(5))
                metadata, photos = await fetcher.fetch(get_endpoint(TOKEN))

        assert metadata.stream_name == "Summer Trip"
        assert [p.photo_guid for p in photos] == ["GUID-1", "GUID-2"]

    @pytest.mark.asyncio
    async def test_reuses_successful_probe(self, stream_payload, fast_executor):
        probe = HttpResult(status=200, body=json.dumps(stream_payload).encode())
        with aioresponses() as mocked:
            async with aiohttp.ClientSession() as session:
                fetcher = StreamMetadataFetcher(session, fast_executor, make_timeout(5))
                metadata, _ = await fetcher.fetch(get_endpoint(TOKEN), probe=probe)
            assert not mocked.requests

        assert metadata.stream_name == "Summer Trip"

    @pytest.mark.asyncio
    async def test_not_found_is_a_status_error(self, fast_executor):
        with aioresponses() as mocked:
            mocked.post(STREAM_URL, status=404)
            async with aiohttp.ClientSession() as session:
                fetcher = StreamMetadataFetcher(session, fast_executor, make_timeout(5))
                with pytest.raises(StatusError) as excinfo:
                    await fetcher.fetch(get_endpoint(TOKEN))
        assert excinfo.value.status == 404

    @pytest.mark.asyncio
    async def test_invalid_json_is_a_schema_error(self, fast_executor):
        with aioresponses() as mocked:
            mocked.post(STREAM_URL, status=200, body="not json")
            async with aiohttp.ClientSession() as session:
                fetcher = StreamMetadataFetcher(session, fast_executor, make_timeout(5))
                with pytest.raises(SchemaError):
                    await fetcher.fetch(get_endpoint(TOKEN))
