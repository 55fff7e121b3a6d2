"""Tests for aggregation and option constructors."""

import json
import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from EsQuery import (
    Direction,
    agg,
    aggs,
    aggs_block,
    avg_agg,
    date_histogram,
    extended_bounds,
    histogram,
    interval,
    max_agg,
    min_agg,
    min_doc_count,
    missing,
    order,
    percentiles_agg,
    query,
    stats_agg,
    sum_agg,
    terms_agg,
    time_zone,
)


class TestPercentiles(unittest.TestCase):
    def test_without_percents(self) -> None:
        self.assertEqual(query(percentiles_agg("load_time")), '{"size":0,"stats":{"field":"load_time"}}')

    def test_with_percents(self) -> None:
        s = query(percentiles_agg("load_time", 95, 99, 99.9))
        self.assertEqual(json.loads(s), {"size": 0, "stats": {"field": "load_time", "percents": [95.0, 99.0, 99.9]}})

    def test_percents_have_two_decimals_in_order(self) -> None:
        text = str(percentiles_agg("load_time", 99.9, 95, 50.125))
        self.assertIn("[99.90,\n95.00,\n50.12]", text)

    def test_non_finite_percent_is_rejected(self) -> None:
        for bad in (float("nan"), float("inf"), float("-inf")):
            with self.subTest(bad=bad):
                with self.assertRaisesRegex(ValueError, r"percent #1 must be finite"):
                    percentiles_agg("load_time", 95, bad)


class TestHistograms(unittest.TestCase):
    def test_histogram_with_options(self) -> None:
        h = histogram(
            "load_time",
            interval(50),
            min_doc_count(1),
            extended_bounds(0, 500),
            order("something", Direction.ASCENDING),
        )
        self.assertEqual(
            query(h),
            '{"histogram":{"extended_bounds":{"max":500,"min":0},"field":"load_time",'
            '"interval":50,"min_doc_count":1,"order":{"something":"asc"}},"size":0}',
        )

    def test_histogram_missing_and_descending(self) -> None:
        h = histogram("load_time", interval(10), missing(0), order("_count", Direction.DESCENDING))
        data = json.loads(query(h))["histogram"]
        self.assertEqual(data["missing"], 0)
        self.assertEqual(data["order"], {"_count": "desc"})

    def test_order_accepts_plain_direction_string(self) -> None:
        self.assertEqual(str(order("_key", "desc")), '"order": {"_key": "desc"}')

    def test_date_histogram_with_fixed_zone(self) -> None:
        h = date_histogram("30m", time_zone("-08:00"))
        self.assertEqual(
            query(h),
            '{"date_histogram":{"field":"timestamp","interval":"30m","time_zone":"-08:00"},"size":0}',
        )

    def test_date_histogram_custom_field(self) -> None:
        h = date_histogram("1d", min_doc_count(0), field="created_at")
        data = json.loads(query(h))["date_histogram"]
        self.assertEqual(data, {"field": "created_at", "interval": "1d", "min_doc_count": 0})


class TestMetrics(unittest.TestCase):
    def test_single_field_metrics(self) -> None:
        for kind, ctor in (("sum", sum_agg), ("avg", avg_agg), ("min", min_agg), ("max", max_agg), ("stats", stats_agg)):
            with self.subTest(kind=kind):
                self.assertEqual(json.loads(query(ctor("duration"))), {"size": 0, kind: {"field": "duration"}})

    def test_terms(self) -> None:
        self.assertEqual(str(terms_agg("repo", 25)), '"terms": {"field": "repo", "size": 25}')

    def test_aggs_block_matches_aggs_of_agg(self) -> None:
        self.assertEqual(
            query(aggs_block("total", sum_agg("duration"))),
            query(aggs(agg("total", sum_agg("duration")))),
        )

    def test_aggs_block_shape(self) -> None:
        data = json.loads(query(aggs_block("repos", terms_agg("repo", 5), aggs_block("total", sum_agg("d")))))
        self.assertEqual(
            data["aggs"],
            {"repos": {"terms": {"field": "repo", "size": 5}, "aggs": {"total": {"sum": {"field": "d"}}}}},
        )


if __name__ == "__main__":
    unittest.main()
