"""
Tests for the usage counter and its JSON persistence.
"""

import json
from datetime import datetime

from pagegrab.stats.usage_counter import UsageCounter


def fixed_clock(year=2024, month=3):
    return lambda: datetime(year, month, 15, 12, 0, 0)


def test_current_month_is_zero_padded(tmp_path):
    counter = UsageCounter(str(tmp_path / "stats.json"), clock=fixed_clock(2024, 3))

    assert counter.current_month() == "2024-03"


def test_record_counts_per_url_and_mode(tmp_path):
    counter = UsageCounter(str(tmp_path / "stats.json"), clock=fixed_clock())
    url = "https://example.com/"

    for _ in range(3):
        counter.record(url, "text")
    counter.record(url, "article")
    counter.record("https://other.example/", "text")

    assert counter.count(url, "text") == 3
    assert counter.count(url, "article") == 1
    assert counter.dump() == {
        "2024-03": {
            url: {"text": 3, "article": 1},
            "https://other.example/": {"text": 1},
        }
    }


def test_record_persists_whole_structure(tmp_path):
    stats_file = tmp_path / "data" / "stats.json"
    counter = UsageCounter(str(stats_file), clock=fixed_clock())

    counter.record("https://example.com/", "source")

    assert json.loads(stats_file.read_text()) == {
        "2024-03": {"https://example.com/": {"source": 1}}
    }


def test_months_accumulate(tmp_path):
    stats_file = str(tmp_path / "stats.json")
    counter = UsageCounter(stats_file, clock=fixed_clock(2024, 1))
    counter.record("https://example.com/", "text")

    counter.clock = fixed_clock(2024, 2)
    counter.record("https://example.com/", "text")

    assert set(counter.dump()) == {"2024-01", "2024-02"}


def test_load_restores_persisted_counts(tmp_path):
    stats_file = str(tmp_path / "stats.json")
    UsageCounter(stats_file, clock=fixed_clock()).record("https://example.com/", "print")

    reloaded = UsageCounter(stats_file, clock=fixed_clock())
    reloaded.load()

    assert reloaded.count("https://example.com/", "print") == 1


def test_load_missing_file_starts_empty(tmp_path):
    counter = UsageCounter(str(tmp_path / "nested" / "stats.json"))

    assert counter.load() == {}
    assert (tmp_path / "nested").is_dir()


def test_load_corrupt_file_starts_empty(tmp_path):
    stats_file = tmp_path / "stats.json"
    stats_file.write_text("{not json")
    counter = UsageCounter(str(stats_file))

    assert counter.load() == {}


def test_load_non_object_starts_empty(tmp_path):
    stats_file = tmp_path / "stats.json"
    stats_file.write_text("[1, 2, 3]")
    counter = UsageCounter(str(stats_file))

    assert counter.load() == {}


def test_failed_save_keeps_count_and_does_not_raise(tmp_path):
    # A directory where the file should be makes every write fail
    stats_path = tmp_path / "stats.json"
    stats_path.mkdir()
    counter = UsageCounter(str(stats_path), clock=fixed_clock())

    assert counter.record("https://example.com/", "text") == 1
    assert counter.count("https://example.com/", "text") == 1


def test_load_wrong_nested_shape_starts_empty(tmp_path):
    stats_file = tmp_path / "stats.json"
    counter = UsageCounter(str(stats_file), clock=fixed_clock())

    for payload in ({"2024-03": []}, {"2024-03": {"https://example.com/": "text"}},
                    {"2024-03": {"https://example.com/": {"text": "3"}}}):
        stats_file.write_text(json.dumps(payload))
        assert counter.load() == {}

    assert counter.record("https://example.com/", "text") == 1


def test_load_keeps_well_formed_history(tmp_path):
    stats_file = tmp_path / "stats.json"
    payload = {"2023-12": {"https://example.com/": {"text": 7, "source": 2}}}
    stats_file.write_text(json.dumps(payload))
    counter = UsageCounter(str(stats_file), clock=fixed_clock())

    assert counter.load() == payload


def test_count_defaults_to_current_month(tmp_path):
    counter = UsageCounter(str(tmp_path / "stats.json"), clock=fixed_clock(2024, 1))
    counter.record("https://example.com/", "text")
    counter.clock = fixed_clock(2024, 2)

    assert counter.count("https://example.com/", "text") == 0
    assert counter.count("https://example.com/", "text", month=None) == 0
    assert counter.count("https://example.com/", "text", month="2024-01") == 1
