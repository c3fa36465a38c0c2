"""
Unit tests for the order block detector.

The detector is pure: every test builds a series + snapshot and checks
the resulting Signal.
"""

import random

import pytest

from smcscan.domain.entities.signal import OrderBlockType
from smcscan.domain.services.order_block_detector import DetectorConfig, OrderBlockDetector

from tests.factories import (
    BUYING_ZONE_ROWS,
    SELLING_ZONE_ROWS,
    SNAPSHOT_TIME,
    make_series,
    make_snapshot,
)


@pytest.fixture
def detector():
    return OrderBlockDetector(DetectorConfig())


class TestBuyingZone:
    """Strong bearish, high-volume prev candle held by the current price."""

    @pytest.mark.unit
    def test_example_scenario(self, detector):
        signal = detector.detect(make_series(BUYING_ZONE_ROWS), make_snapshot(price=96))
        assert signal.classification == OrderBlockType.BUYING_ZONE
        assert signal.reference_price == 100
        assert "100.00" in signal.explanation
        assert "buying" in signal.explanation.lower()

    @pytest.mark.unit
    def test_small_bearish_latest_still_qualifies(self, detector):
        rows = BUYING_ZONE_ROWS[:2] + [(91, 92, 89, 90.5, 500)]
        signal = detector.detect(make_series(rows), make_snapshot(price=96))
        assert signal.classification == OrderBlockType.BUYING_ZONE

    @pytest.mark.unit
    def test_strong_bearish_latest_rejects(self, detector):
        rows = BUYING_ZONE_ROWS[:2] + [(95, 96, 89, 90, 500)]
        signal = detector.detect(make_series(rows), make_snapshot(price=96))
        assert signal.classification == OrderBlockType.NONE

    @pytest.mark.unit
    def test_price_at_or_below_prev_low_rejects(self, detector):
        series = make_series(BUYING_ZONE_ROWS)
        assert detector.detect(series, make_snapshot(price=95)).classification == OrderBlockType.NONE
        assert detector.detect(series, make_snapshot(price=80)).classification == OrderBlockType.NONE

    @pytest.mark.unit
    def test_weak_body_rejects(self, detector):
        rows = [BUYING_ZONE_ROWS[0], (100, 101, 99, 99.5, 1000), BUYING_ZONE_ROWS[2]]
        signal = detector.detect(make_series(rows), make_snapshot(price=96))
        assert signal.classification == OrderBlockType.NONE

    @pytest.mark.unit
    def test_low_volume_rejects(self, detector):
        rows = [(100, 101, 99, 100, 900), (100, 105, 95, 90, 1000), (90, 92, 88, 91, 900)]
        signal = detector.detect(make_series(rows), make_snapshot(price=96))
        assert signal.classification == OrderBlockType.NONE


class TestSellingZone:

    @pytest.mark.unit
    def test_selling_zone_detected(self, detector):
        signal = detector.detect(make_series(SELLING_ZONE_ROWS), make_snapshot(price=108))
        assert signal.classification == OrderBlockType.SELLING_ZONE
        assert signal.reference_price == 100
        assert "selling" in signal.explanation.lower()

    @pytest.mark.unit
    def test_price_at_or_above_prev_high_rejects(self, detector):
        signal = detector.detect(make_series(SELLING_ZONE_ROWS), make_snapshot(price=112))
        assert signal.classification == OrderBlockType.NONE


class TestMinimumLength:

    @pytest.mark.unit
    @pytest.mark.parametrize("length", [0, 1, 2])
    def test_short_series_is_insufficient(self, detector, length):
        signal = detector.detect(make_series(BUYING_ZONE_ROWS[:length]), make_snapshot())
        assert signal.classification == OrderBlockType.NONE
        assert signal.reference_price is None
        assert signal.explanation.startswith("insufficient data")

    @pytest.mark.unit
    def test_three_candles_can_fire(self, detector):
        signal = detector.detect(make_series(BUYING_ZONE_ROWS), make_snapshot())
        assert signal.classification != OrderBlockType.NONE

    @pytest.mark.unit
    def test_only_last_three_candles_are_classified(self, detector):
        # Older candles only affect the average volume
        rows = [(50, 51, 49, 50, 100)] * 5 + BUYING_ZONE_ROWS
        signal = detector.detect(make_series(rows), make_snapshot(price=96))
        assert signal.classification == OrderBlockType.BUYING_ZONE


class TestNumericEdges:

    @pytest.mark.unit
    def test_zero_volume_series(self, detector):
        rows = [(o, h, l, c, 0) for (o, h, l, c, _v) in BUYING_ZONE_ROWS]
        signal = detector.detect(make_series(rows), make_snapshot(price=96))
        assert signal.classification == OrderBlockType.NONE
        assert signal.explanation == "no pattern detected"

    @pytest.mark.unit
    def test_prev_open_zero_is_not_strong(self, detector):
        rows = [(1, 1, 1, 1, 10), (0, 0, -1, -1, 1000), (1, 2, 0.5, 1.5, 10)]
        signal = detector.detect(make_series(rows), make_snapshot(price=0.5))
        assert signal.classification == OrderBlockType.NONE

    @pytest.mark.unit
    def test_latest_open_zero_needs_direction(self, detector):
        flat = BUYING_ZONE_ROWS[:2] + [(0, 0, 0, 0, 500)]
        assert detector.detect(make_series(flat), make_snapshot()).classification == OrderBlockType.NONE

        rising = BUYING_ZONE_ROWS[:2] + [(0, 2, 0, 1, 500)]
        assert detector.detect(make_series(rising), make_snapshot()).classification == OrderBlockType.BUYING_ZONE


class TestSignalShape:

    @pytest.mark.unit
    def test_signal_copies_snapshot(self, detector):
        snapshot = make_snapshot(symbol_id="ETH", price=96, volume=42, display_name="Ethereum")
        signal = detector.detect(make_series(BUYING_ZONE_ROWS, symbol_id="ETH"), snapshot)
        assert signal.symbol_id == "ETH"
        assert signal.display_name == "Ethereum"
        assert signal.current_price == 96
        assert signal.current_volume == 42
        assert signal.timestamp == SNAPSHOT_TIME

    @pytest.mark.unit
    def test_display_name_falls_back_to_symbol(self, detector):
        signal = detector.detect(make_series(BUYING_ZONE_ROWS), make_snapshot(display_name=""))
        assert signal.display_name == "BTC"

    @pytest.mark.unit
    def test_wire_format_field_names(self, detector):
        payload = detector.detect(make_series(BUYING_ZONE_ROWS), make_snapshot()).to_dict()
        assert set(payload) == {
            "symbolId", "displayName", "currentPrice", "currentVolume",
            "timestamp", "classification", "referencePrice", "explanation",
        }
        assert payload["classification"] == "BuyingZone"
        assert payload["timestamp"] == SNAPSHOT_TIME.isoformat()

    @pytest.mark.unit
    def test_custom_thresholds(self):
        strict = OrderBlockDetector(DetectorConfig(strong_body_ratio=0.2))
        signal = strict.detect(make_series(BUYING_ZONE_ROWS), make_snapshot())
        assert signal.classification == OrderBlockType.NONE


class TestProperties:

    @staticmethod
    def _random_rows(rng, length):
        rows = []
        for _ in range(length):
            o = rng.uniform(1, 200)
            c = o * rng.uniform(0.9, 1.1)
            h = max(o, c) * rng.uniform(1.0, 1.05)
            l = min(o, c) * rng.uniform(0.95, 1.0)
            rows.append((o, h, l, c, rng.choice([0, rng.uniform(0, 5000)])))
        return rows

    @pytest.mark.unit
    def test_deterministic(self, detector):
        rng = random.Random(7)
        for _ in range(200):
            series = make_series(self._random_rows(rng, rng.randint(0, 8)))
            snapshot = make_snapshot(price=rng.uniform(1, 200))
            assert detector.detect(series, snapshot) == detector.detect(series, snapshot)

    @pytest.mark.unit
    def test_zones_are_mutually_exclusive(self, detector):
        rng = random.Random(11)
        for _ in range(500):
            series = make_series(self._random_rows(rng, rng.randint(3, 8)))
            signal = detector.detect(series, make_snapshot(price=rng.uniform(1, 200)))
            prev = series[-2]
            if signal.classification == OrderBlockType.BUYING_ZONE:
                assert prev.close < prev.open
            elif signal.classification == OrderBlockType.SELLING_ZONE:
                assert prev.close > prev.open
            else:
                assert signal.reference_price is None
