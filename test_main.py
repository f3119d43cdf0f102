"""Tests for the command-line entry point."""

import argparse
import json
import signal
import sys
import threading
from unittest.mock import Mock, patch

import pytest
from box import Box

import main

install_cancel_handler = main.install_cancel_handler


def make_args(**overrides):
    defaults = dict(
        flush_interval=None,
        no_progressive=False,
        dedupe=False,
        no_csv=False,
        output_dir=None,
        max_pages=None,
        delay=None,
        no_progress=False,
        min_price=None,
        max_price=None,
        search=None,
    )
    defaults.update(overrides)
    return argparse.Namespace(**defaults)


@pytest.fixture
def run_main(monkeypatch):
    monkeypatch.setattr(main, "setup_logging", lambda **kwargs: None)
    monkeypatch.setattr(main, "install_cancel_handler", lambda event: None)
    monkeypatch.setattr(main, "load_dotenv", lambda: None)

    def run(*argv):
        monkeypatch.setattr(sys, "argv", ["main.py", *argv])
        return main.main()

    return run


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "scraper:\n"
        "  request_delay: 0\n"
        "  hotline:\n"
        "    categories:\n"
        "      - url: https://hotline.ua/mobile/\n"
        f"storage:\n  output_dir: {tmp_path.as_posix()}/output\n",
        encoding="utf-8",
    )
    return path


class TestGetCategories:
    def test_url_argument_wins(self):
        config = Box({"scraper": {"hotline": {"categories": ["https://hotline.ua/tv/"]}}})
        assert main.get_categories(config, "https://hotline.ua/mobile/") == [
            "https://hotline.ua/mobile/"
        ]

    def test_categories_from_config(self):
        config = Box(
            {
                "scraper": {
                    "hotline": {
                        "categories": [
                            {"name": "tv", "url": "https://hotline.ua/tv/"},
                            "https://hotline.ua/audio/",
                        ]
                    }
                }
            }
        )

        assert main.get_categories(config) == [
            "https://hotline.ua/tv/",
            "https://hotline.ua/audio/",
        ]

    def test_categories_file(self, tmp_path):
        path = tmp_path / "categories.txt"
        path.write_text("https://hotline.ua/tv/\n", encoding="utf-8")

        assert main.get_categories(Box({}), categories_file=str(path)) == [
            "https://hotline.ua/tv/"
        ]

    def test_missing_file_falls_back_to_config(self, tmp_path):
        config = Box(
            {
                "scraper": {
                    "hotline": {
                        "categories_file": str(tmp_path / "missing.txt"),
                        "categories": ["https://hotline.ua/tv/"],
                    }
                }
            }
        )

        assert main.get_categories(config) == ["https://hotline.ua/tv/"]


def test_apply_overrides():
    config = Box({"storage": {"save_interval": 5}})
    args = make_args(flush_interval=2, dedupe=True, no_csv=True, max_pages=4, delay=0.0)

    config = main.apply_overrides(config, args)

    assert config.storage.save_interval == 2
    assert config.storage.deduplicate is True
    assert config.storage.export_csv is False
    assert config.scraper.hotline.max_pages == 4
    assert config.scraper.request_delay == 0.0


class TestMain:
    def test_scrape_run(self, run_main, config_file):
        pipeline = Mock()
        pipeline.run_categories.return_value = {"mobile": {"count": 3}}

        with patch.object(main.HotlinePipeline, "create_from_config", return_value=pipeline):
            assert run_main("-c", str(config_file), "--dedupe") == 0

        urls = pipeline.run_categories.call_args.args[0]
        assert urls == ["https://hotline.ua/mobile/"]
        pipeline.close.assert_called_once()

    def test_failed_category_sets_exit_code(self, run_main, config_file):
        pipeline = Mock()
        pipeline.run_categories.return_value = {"mobile": {"error": "page 2: boom"}}

        with patch.object(main.HotlinePipeline, "create_from_config", return_value=pipeline):
            assert run_main("-c", str(config_file)) == 1

    def test_no_categories(self, run_main, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("scraper: {}\n", encoding="utf-8")

        assert run_main("-c", str(path)) == 1

    def test_invalid_settings(self, run_main, config_file):
        assert run_main("-c", str(config_file), "--flush-interval", "0") == 1

    def test_extract_categories(self, run_main, config_file, tmp_path):
        dump = tmp_path / "urls.txt"
        dump.write_text("https://hotline.ua/mobile/ https://hotline.ua/login\n", encoding="utf-8")
        output = tmp_path / "categories.txt"

        code = run_main(
            "-c", str(config_file),
            "--extract-categories", str(dump),
            "--categories-output", str(output),
        )

        assert code == 0
        assert output.read_text(encoding="utf-8") == "https://hotline.ua/mobile/\n"

    def test_report(self, run_main, config_file, tmp_path, caplog):
        json_dir = tmp_path / "output" / "JSON"
        json_dir.mkdir(parents=True)
        (json_dir / "mobile.json").write_text(
            json.dumps([{"_id": 1, "title": "Phone", "minPrice": 100}]), encoding="utf-8"
        )

        with caplog.at_level("INFO"):
            code = run_main("-c", str(config_file), "--report", "--search", "phone")

        assert code == 0
        assert "mobile.json: 1 products" in caplog.text
        assert 'Products with "phone" in the title: 1' in caplog.text

    def test_missing_config_exits(self, run_main, tmp_path):
        with pytest.raises(SystemExit):
            run_main("-c", str(tmp_path / "missing.yaml"))


class TestCancelHandler:
    def test_first_interrupt_sets_flag(self):
        cancel = threading.Event()
        before = signal.getsignal(signal.SIGINT)

        previous = install_cancel_handler(cancel)
        try:
            signal.getsignal(signal.SIGINT)(signal.SIGINT, None)
            assert cancel.is_set()
            assert signal.getsignal(signal.SIGINT) is signal.default_int_handler
        finally:
            signal.signal(signal.SIGINT, previous)

        assert previous is before

    def test_handler_restored_after_run(self, run_main, config_file, monkeypatch):
        monkeypatch.setattr(main, "install_cancel_handler", install_cancel_handler)
        before = signal.getsignal(signal.SIGINT)
        pipeline = Mock()
        pipeline.run_categories.return_value = {"mobile": {"count": 1}}

        with patch.object(main.HotlinePipeline, "create_from_config", return_value=pipeline):
            assert run_main("-c", str(config_file)) == 0

        assert signal.getsignal(signal.SIGINT) is before

    def test_handler_restored_when_run_fails(self, run_main, config_file, monkeypatch):
        monkeypatch.setattr(main, "install_cancel_handler", install_cancel_handler)
        before = signal.getsignal(signal.SIGINT)
        pipeline = Mock()
        pipeline.run_categories.side_effect = OSError("disk full")

        with patch.object(main.HotlinePipeline, "create_from_config", return_value=pipeline):
            with pytest.raises(OSError):
                run_main("-c", str(config_file))

        assert signal.getsignal(signal.SIGINT) is before
        pipeline.close.assert_called_once()
