"""Tests for running categories end to end against a mocked catalog API."""

import csv
import json
import logging
import threading
from unittest.mock import patch

import pytest

from models.settings import RunSettings, StorageSettings
from pipelines import HotlinePipeline
from scraper.errors import PaginationError, RemoteErrorsError, ScrapeCancelled
from storage.json_storage import JSONStorage

CATEGORY_URL = "https://hotline.ua/mobile/mobilnye-telefony-i-smartfony/"
NAME = "mobilnye-telefony-i-smartfony"


@pytest.fixture
def make_pipeline(scraper, tmp_path):
    def make(**storage):
        settings = RunSettings(
            storage=StorageSettings(output_dir=str(tmp_path), **storage)
        )
        return HotlinePipeline(scraper, settings)

    return make


def read_json_ids(path):
    with open(path, "r", encoding="utf-8") as file:
        return [item["_id"] for item in json.load(file)]


def read_csv_ids(path):
    with open(path, "r", encoding="utf-8-sig", newline="") as file:
        return [row[0] for row in list(csv.reader(file))[1:]]


class TestRunPipeline:
    def test_single_page_category(self, make_pipeline, serve_pages, make_item, tmp_path):
        serve_pages([[make_item(3), make_item(1), make_item(2)]])

        products = make_pipeline().run_pipeline(CATEGORY_URL)

        assert [p.product_id for p in products] == [3, 1, 2]
        assert read_json_ids(tmp_path / "JSON" / f"{NAME}.json") == [3, 1, 2]
        assert read_csv_ids(tmp_path / "CSV" / f"{NAME}.csv") == ["3", "1", "2"]

    def test_flush_after_every_page(self, make_pipeline, serve_pages, make_item, tmp_path):
        serve_pages(
            [
                [make_item(1), make_item(2)],
                [make_item(3), make_item(4)],
                [make_item(5), make_item(6)],
            ]
        )

        with patch.object(
            JSONStorage, "flush", autospec=True, side_effect=JSONStorage.flush
        ) as flush:
            make_pipeline(save_interval=1).run_pipeline(CATEGORY_URL)

        assert flush.call_count == 3
        batches = [[p.product_id for p in call.args[1]] for call in flush.call_args_list]
        assert batches == [[1, 2], [3, 4], [5, 6]]
        assert read_json_ids(tmp_path / "JSON" / f"{NAME}.json") == [1, 2, 3, 4, 5, 6]

    def test_flush_interval_groups_pages(self, make_pipeline, serve_pages, make_item):
        serve_pages([[make_item(n)] for n in range(1, 6)])

        with patch.object(
            JSONStorage, "flush", autospec=True, side_effect=JSONStorage.flush
        ) as flush:
            make_pipeline(save_interval=2).run_pipeline(CATEGORY_URL)

        batches = [[p.product_id for p in call.args[1]] for call in flush.call_args_list]
        assert batches == [[1], [2, 3], [4, 5]]
        assert [call.kwargs["reset"] for call in flush.call_args_list] == [
            True,
            False,
            False,
        ]

    def test_failure_keeps_flushed_pages(
        self, make_pipeline, serve_pages, make_item, make_response, session, tmp_path
    ):
        responses = serve_pages([[make_item(1), make_item(2)], [], []])
        responses[1] = make_response({"errors": [{"message": "rate limited"}]})
        session.request.side_effect = responses

        with pytest.raises(RemoteErrorsError):
            make_pipeline(save_interval=5).run_pipeline(CATEGORY_URL)

        assert read_json_ids(tmp_path / "JSON" / f"{NAME}.json") == [1, 2]
        assert not (tmp_path / "CSV" / f"{NAME}.csv").exists()

    def test_cancel_keeps_completed_pages(
        self, make_pipeline, serve_pages, make_item, session, tmp_path, caplog
    ):
        responses = serve_pages([[make_item(n)] for n in range(1, 5)])
        cancel = threading.Event()

        def request(*args, **kwargs):
            if kwargs["json"]["variables"]["page"] == 3:
                cancel.set()
            return responses.pop(0)

        session.request.side_effect = request

        with caplog.at_level(logging.WARNING):
            with pytest.raises(ScrapeCancelled):
                make_pipeline().run_pipeline(CATEGORY_URL, cancel_event=cancel)

        assert session.request.call_count == 3
        assert read_json_ids(tmp_path / "JSON" / f"{NAME}.json") == [1, 2, 3]
        assert not (tmp_path / "CSV" / f"{NAME}.csv").exists()
        assert "cancelled after page 3" in caplog.text
        assert "aborted" not in caplog.text

    def test_unusable_pagination_keeps_first_page(
        self, make_pipeline, make_item, make_response, session, tmp_path
    ):
        session.request.return_value = make_response(
            {
                "data": {
                    "byPathSectionQueryProducts": {
                        "collection": [make_item(1), make_item(2)],
                        "paginationInfo": None,
                    }
                }
            }
        )

        with pytest.raises(PaginationError):
            make_pipeline().run_pipeline(CATEGORY_URL)

        assert read_json_ids(tmp_path / "JSON" / f"{NAME}.json") == [1, 2]

    def test_stale_file_from_previous_run_is_replaced(
        self, make_pipeline, serve_pages, make_item, tmp_path
    ):
        stale = tmp_path / "JSON" / f"{NAME}.json"
        stale.parent.mkdir(parents=True)
        stale.write_text(json.dumps([{"_id": 99, "title": "old"}]), encoding="utf-8")
        serve_pages([[make_item(1)], [make_item(2)]])

        make_pipeline(save_interval=10).run_pipeline(CATEGORY_URL)

        assert read_json_ids(stale) == [1, 2]

    def test_without_progressive_saves(self, make_pipeline, serve_pages, make_item, tmp_path):
        serve_pages([[make_item(1)], [make_item(2)]])

        with patch.object(JSONStorage, "flush", autospec=True) as flush:
            make_pipeline(save_progressively=False).run_pipeline(CATEGORY_URL)

        flush.assert_not_called()
        assert read_json_ids(tmp_path / "JSON" / f"{NAME}.json") == [1, 2]

    def test_csv_export_can_be_disabled(self, make_pipeline, serve_pages, make_item, tmp_path):
        serve_pages([[make_item(1)]])

        make_pipeline(export_csv=False).run_pipeline(CATEGORY_URL)

        assert (tmp_path / "JSON" / f"{NAME}.json").exists()
        assert not (tmp_path / "CSV").exists()

    def test_duplicates_kept_by_default(self, make_pipeline, serve_pages, make_item):
        serve_pages([[make_item(1), make_item(2)], [make_item(2), make_item(3)]])

        products = make_pipeline().run_pipeline(CATEGORY_URL)

        assert [p.product_id for p in products] == [1, 2, 2, 3]

    def test_deduplicate_across_pages(self, make_pipeline, serve_pages, make_item, tmp_path):
        serve_pages([[make_item(1), make_item(2)], [make_item(2), make_item(3)]])

        products = make_pipeline(deduplicate=True).run_pipeline(CATEGORY_URL)

        assert [p.product_id for p in products] == [1, 2, 3]
        assert read_json_ids(tmp_path / "JSON" / f"{NAME}.json") == [1, 2, 3]


class TestRunCategories:
    def test_failed_category_does_not_stop_the_run(
        self, make_pipeline, make_item, make_body, make_response, session
    ):
        session.request.side_effect = [
            make_response({"errors": ["forbidden"]}),
            make_response(make_body([make_item(1), make_item(2)])),
        ]

        results = make_pipeline().run_categories(["tv", "audio"])

        assert "error" in results["tv"]
        assert results["audio"] == {"count": 2}

    def test_invalid_url_is_skipped(self, make_pipeline, make_item, make_body, make_response, session):
        session.request.return_value = make_response(make_body([make_item(1)]))

        results = make_pipeline().run_categories(["https://example.com/tv/", "tv"])

        assert "error" in results["https://example.com/tv/"]
        assert results["tv"] == {"count": 1}
        assert session.request.call_count == 1

    def test_cancel_stops_remaining_categories(self, make_pipeline, serve_pages, make_item, session):
        serve_pages([[make_item(1)], [make_item(2)]])
        cancel = threading.Event()
        cancel.set()

        results = make_pipeline().run_categories(["tv", "audio"], cancel_event=cancel)

        assert list(results) == ["tv"]
        assert "cancelled" in results["tv"]["error"]
        assert session.request.call_count == 1

    def test_create_from_config(self, tmp_path):
        config = {
            "scraper": {
                "request_delay": 0,
                "show_progress": False,
                "hotline": {"x_token": "abc", "items_per_page": 24},
            },
            "storage": {"output_dir": str(tmp_path), "save_interval": 2},
        }

        pipeline = HotlinePipeline.create_from_config(config)

        assert pipeline.scraper.items_per_page == 24
        assert pipeline.scraper.token_source.get_tokens("tv").token == "abc"
        assert pipeline.settings.storage.save_interval == 2
        pipeline.close()
