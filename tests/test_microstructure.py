import pytest

from signal_engine.constants import MicroPrediction
from signal_engine.core.microstructure import MicroStructure, MicroStructureAnalyzer
from signal_engine.utils.candle import Candle, Tick


def _ticks(prices: list[float]) -> list[Tick]:
    return [Tick(timestamp=1000 + i, price=p) for i, p in enumerate(prices)]


WIDE_BODY = Candle(timestamp=0, open=100.0, high=100.3, low=99.9, close=100.25)
DOJI_BODY = Candle(timestamp=0, open=100.0, high=100.2, low=99.9, close=100.01)


def test_too_few_ticks_is_uncertain():
    m = MicroStructureAnalyzer.analyze(_ticks([100.0] * 5), WIDE_BODY)
    assert m == MicroStructure()
    assert (m.momentum, m.volatility, m.prediction) == (0, 0, MicroPrediction.UNCERTAIN)


def test_flat_ticks_predict_consolidation():
    m = MicroStructureAnalyzer.analyze(_ticks([100.0] * 20), WIDE_BODY)
    assert m.prediction == MicroPrediction.CONSOLIDATION_LIKELY
    assert m.momentum == 0
    assert m.confidence == 1.0


def test_rising_ticks_predict_bullish_continuation():
    m = MicroStructureAnalyzer.analyze(_ticks([100 + 0.05 * i for i in range(20)]), WIDE_BODY)
    assert m.prediction == MicroPrediction.BULLISH_CONTINUATION
    assert m.momentum == pytest.approx(0.95 / 100)


def test_falling_ticks_predict_bearish_continuation():
    m = MicroStructureAnalyzer.analyze(_ticks([100 - 0.05 * i for i in range(20)]), WIDE_BODY)
    assert m.prediction == MicroPrediction.BEARISH_CONTINUATION
    assert m.momentum < 0


def test_small_body_candle_is_doji_forming():
    prices = [100.0 if i % 2 == 0 else 100.1 for i in range(20)]
    assert MicroStructureAnalyzer.analyze(_ticks(prices), DOJI_BODY).prediction == MicroPrediction.DOJI_FORMING
    assert MicroStructureAnalyzer.analyze(_ticks(prices), WIDE_BODY).prediction == MicroPrediction.UNCERTAIN


def test_confidence_scales_with_tick_count():
    m = MicroStructureAnalyzer.analyze(_ticks([100.0] * 12), WIDE_BODY)
    assert m.confidence == pytest.approx(0.6)


def test_only_last_twenty_ticks_count():
    prices = [50.0] * 30 + [100.0] * 20
    m = MicroStructureAnalyzer.analyze(_ticks(prices), WIDE_BODY)
    assert m.momentum == 0
    assert m.volatility == 0
