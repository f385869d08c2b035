import itertools

import pytest

from signal_engine.constants import Action, PatternSignal, PatternType, RegimeType
from signal_engine.core.engine import Decision
from signal_engine.core.expiry import DurationOptimizer
from signal_engine.core.patterns import CandlePattern
from signal_engine.core.regime import MarketRegime


def _decision(confidence: float) -> Decision:
    return Decision(action=Action.BUY, reason="test", confidence=confidence)


def _regime(kind: RegimeType) -> MarketRegime:
    return MarketRegime(type=kind, confidence=0.5)


NO_PATTERN = CandlePattern()
SOLDIERS = CandlePattern(PatternType.THREE_WHITE_SOLDIERS, 0.9, PatternSignal.STRONG_BULLISH)


def test_neutral_inputs_keep_base_duration():
    plan = DurationOptimizer.plan(_decision(0.7), _regime(RegimeType.NEUTRAL), 0.01, NO_PATTERN, 60)
    assert plan.duration == 60
    assert plan.risk_score == pytest.approx(0.5)
    assert plan.rationale == "Optimized from 60s to 60s (NEUTRAL, Vol: 1.000%)"


def test_strong_trend_with_pattern_holds_longer():
    plan = DurationOptimizer.plan(_decision(0.9), _regime(RegimeType.STRONG_UPTREND), 0.001, SOLDIERS, 60)
    # 1.5 * 1.2 * 1.1 * 1.15 = 2.277
    assert plan.duration == 137
    assert plan.risk_score == pytest.approx(0.3 * 0.85 * 0.9 * 0.9)


def test_short_duration_is_clamped_to_base():
    plan = DurationOptimizer.plan(_decision(0.5), _regime(RegimeType.HIGH_VOLATILITY), 0.02, NO_PATTERN, 60)
    assert plan.duration == 60
    assert plan.risk_score == pytest.approx(0.7 * 1.2 * 1.1)


def test_consolidation_baseline():
    plan = DurationOptimizer.plan(_decision(0.7), _regime(RegimeType.CONSOLIDATION), 0.001, NO_PATTERN, 100)
    # 0.8 * 1.1 = 0.88 → below base
    assert plan.duration == 100
    assert plan.risk_score == pytest.approx(0.6 * 0.9)


def test_duration_always_within_bounds():
    regimes = list(RegimeType)
    patterns = [NO_PATTERN, SOLDIERS]
    vols = [0.0, 0.001, 0.01, 0.02, 5.0]
    confs = [0.0, 0.5, 0.7, 0.95]
    for base in (15, 60, 300):
        for kind, pattern, vol, conf in itertools.product(regimes, patterns, vols, confs):
            plan = DurationOptimizer.plan(_decision(conf), _regime(kind), vol, pattern, base)
            assert base <= plan.duration <= 3 * base
            assert plan.risk_score <= 1.0
