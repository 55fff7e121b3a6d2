"""Tests for layered config parsing and validation."""

import sys
import tempfile
import unittest
from copy import deepcopy
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from EsQuery.config import load_config, load_config_with_defaults, merge_config_dicts, parse_config_dict
from EsQuery.config.app import parse_yaml


def _base_raw_config() -> dict:
    return {
        "log": {"level": "info", "to_file": False, "dir": "log"},
        "output": {"pretty": False, "path": None},
        "defaults": {"time_field": "timestamp", "time_zone": None},
        "aggs": {
            "results": {
                "filter": [
                    {"term": {"user.login": "tj"}},
                    {"range": {"gte": "now-7d", "lte": "now"}},
                ],
                "aggs": {
                    "repos": {
                        "terms": {"field": "repository.name.keyword", "size": 100},
                        "aggs": {"duration_sum": {"sum": {"field": "duration"}}},
                    },
                },
            },
            "latency": {
                "histogram": {
                    "field": "load_time",
                    "interval": 50,
                    "min_doc_count": 1,
                    "extended_bounds": {"min": 0, "max": 500},
                    "order": {"_key": "desc"},
                },
            },
        },
    }


class TestConfigLayering(unittest.TestCase):
    def test_parse_success_nested_access(self) -> None:
        cfg = parse_config_dict(_base_raw_config())
        self.assertEqual(cfg.runtime.level, "INFO")
        self.assertFalse(cfg.output.pretty)
        self.assertIsNone(cfg.output.path)

        results, latency = cfg.request.aggs
        self.assertEqual(results.name, "results")
        self.assertIsNone(results.metric)
        self.assertEqual([f.kind for f in results.filters], ["term", "range"])
        self.assertEqual(results.filters[0].field, "user.login")
        self.assertEqual(results.filters[0].value, "tj")
        self.assertEqual(results.filters[1].gte, "now-7d")

        repos = results.children[0]
        self.assertEqual(repos.metric.kind, "terms")
        self.assertEqual(repos.metric.params["size"], 100)
        self.assertEqual(repos.children[0].metric.kind, "sum")

        self.assertEqual(latency.metric.params["extended_bounds"], (0, 500))
        self.assertEqual(latency.metric.params["order"], ("_key", "desc"))

    def test_sections_are_optional(self) -> None:
        cfg = parse_config_dict({})
        self.assertEqual(cfg.runtime.level, "INFO")
        self.assertTrue(cfg.output.pretty)
        self.assertEqual(cfg.request.aggs, ())
        self.assertEqual(cfg.request.time_field, "timestamp")

    def test_terms_size_defaults_to_ten(self) -> None:
        cfg = parse_config_dict({"aggs": {"repos": {"terms": {"field": "repo"}}}})
        self.assertEqual(cfg.request.aggs[0].metric.params["size"], 10)

    def test_percents_are_floats(self) -> None:
        cfg = parse_config_dict({"aggs": {"p": {"percentiles": {"field": "load_time", "percents": [95, 99.9]}}}})
        self.assertEqual(cfg.request.aggs[0].metric.params["percents"], (95.0, 99.9))

    def test_unknown_log_level_error(self) -> None:
        raw = _base_raw_config()
        raw["log"]["level"] = "LOUD"
        with self.assertRaisesRegex(ValueError, "log.level"):
            parse_config_dict(raw)

    def test_unknown_entry_key_error_contains_key(self) -> None:
        raw = _base_raw_config()
        raw["aggs"]["latency"]["bogus"] = {}
        with self.assertRaisesRegex(ValueError, r"aggs\.latency has unknown keys"):
            parse_config_dict(raw)

    def test_two_clauses_error(self) -> None:
        raw = {"aggs": {"x": {"sum": {"field": "a"}, "avg": {"field": "a"}}}}
        with self.assertRaisesRegex(ValueError, "at most one aggregation clause"):
            parse_config_dict(raw)

    def test_empty_entry_error(self) -> None:
        with self.assertRaisesRegex(ValueError, r"aggs\.x must include"):
            parse_config_dict({"aggs": {"x": {}}})

    def test_terms_size_type_error(self) -> None:
        raw = {"aggs": {"repos": {"terms": {"field": "repo", "size": "10"}}}}
        with self.assertRaisesRegex(TypeError, r"aggs\.repos\.terms\.size must be an integer"):
            parse_config_dict(raw)

    def test_bad_order_direction_error(self) -> None:
        raw = deepcopy(_base_raw_config())
        raw["aggs"]["latency"]["histogram"]["order"] = {"_key": "up"}
        with self.assertRaisesRegex(ValueError, "order._key must be one of"):
            parse_config_dict(raw)

    def test_histogram_requires_interval(self) -> None:
        raw = {"aggs": {"h": {"histogram": {"field": "load_time"}}}}
        with self.assertRaisesRegex(ValueError, r"Missing required config: aggs\.h\.histogram\.interval"):
            parse_config_dict(raw)

    def test_unknown_filter_error(self) -> None:
        raw = {"aggs": {"x": {"filter": [{"exists": {"field": "a"}}]}}}
        with self.assertRaisesRegex(ValueError, "unknown filter: exists"):
            parse_config_dict(raw)

    def test_malformed_offset_error(self) -> None:
        raw = {"defaults": {"time_zone": "+8:00"}}
        with self.assertRaisesRegex(ValueError, "defaults.time_zone"):
            parse_config_dict(raw)

    def test_unquoted_yaml_dates_are_range_bounds(self) -> None:
        raw = parse_yaml(
            "aggs:\n"
            "  r:\n"
            "    filter:\n"
            "      - range: {gte: 2024-01-01, lte: 2024-01-31T23:59:59Z}\n"
        )
        bounds = parse_config_dict(raw).request.aggs[0].filters[0]
        self.assertEqual(bounds.gte, "2024-01-01")
        self.assertTrue(bounds.lte.startswith("2024-01-31T23:59:59"))

    def test_range_bound_type_error(self) -> None:
        raw = {"aggs": {"r": {"filter": [{"range": {"gte": 5, "lte": "now"}}]}}}
        with self.assertRaisesRegex(TypeError, r"aggs\.r\.filter\[0\]\.range\.gte must be a string"):
            parse_config_dict(raw)

    def test_merge_is_deep(self) -> None:
        merged = merge_config_dicts({"log": {"level": "INFO", "dir": "log"}}, {"log": {"level": "DEBUG"}})
        self.assertEqual(merged, {"log": {"level": "DEBUG", "dir": "log"}})


class TestConfigFiles(unittest.TestCase):
    def test_default_config_loads(self) -> None:
        cfg = load_config(REPO_ROOT / "config" / "default.yml")
        self.assertEqual(cfg.request.aggs, ())
        self.assertTrue(cfg.output.pretty)

    def test_example_config_loads(self) -> None:
        cfg = load_config(REPO_ROOT / "config" / "example" / "github_labels.yml")
        self.assertEqual([a.name for a in cfg.request.aggs], ["results"])
        self.assertEqual(cfg.request.time_zone, "local")

    def test_override_is_merged_onto_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            override = Path(tmp) / "override.yml"
            override.write_text("output:\n  pretty: false\naggs:\n  total:\n    sum: {field: n}\n", encoding="utf-8")
            cfg = load_config_with_defaults(override, default_path=REPO_ROOT / "config" / "default.yml")
        self.assertFalse(cfg.output.pretty)
        self.assertEqual(cfg.runtime.level, "INFO")
        self.assertEqual(cfg.request.aggs[0].metric.kind, "sum")


if __name__ == "__main__":
    unittest.main()
