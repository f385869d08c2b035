import random

import pytest

from signal_engine.constants import Action, ContractType, RegimeType, TradeResult
from signal_engine.core.engine import Decision, IndicatorSnapshot
from signal_engine.core.expiry import DurationPlan
from signal_engine.core.indicators import Band
from signal_engine.core.microstructure import MicroStructure
from signal_engine.core.patterns import CandlePattern
from signal_engine.core.regime import MarketRegime
from signal_engine.trading.performance import PerformanceTracker, TradeHistory
from signal_engine.trading.simulator import PaperTrader
from signal_engine.trading.trade import TradeRecord, build_intent

PLAN = DurationPlan(duration=90, risk_score=0.4, rationale="test")


def _decision(action=Action.BUY, confidence=0.8, signal=3.0, regime=RegimeType.NEUTRAL,
              pattern_strength=0.0, volatility=0.5) -> Decision:
    snapshot = IndicatorSnapshot(
        ma14=100.0, ma50=100.0, rsi=50.0, bb=Band(101.0, 100.0, 99.0),
        volatility=volatility, atr=1.0, macd=0.1,
        pattern=CandlePattern(strength=pattern_strength), micro=MicroStructure(),
    )
    return Decision(action=action, reason="test", confidence=confidence, composite_signal=signal,
                    indicators=snapshot, regime=MarketRegime(type=regime, confidence=0.5))


def _record(result: TradeResult, profit: float = 1.0) -> TradeRecord:
    return TradeRecord(time=0.0, mode="SIMULATION", symbol="R_100", amount=1.0,
                       decision="BUY", result=result, profit=profit)


# ── intents ──

def test_buy_actions_map_to_call():
    for action in (Action.BUY, Action.STRONG_BUY):
        intent = build_intent(_decision(action), PLAN, "R_100", 2.0)
        assert intent.contract_type == ContractType.CALL
        assert (intent.duration, intent.duration_unit, intent.amount) == (90, "s", 2.0)


def test_sell_actions_map_to_put():
    for action in (Action.SELL, Action.STRONG_SELL):
        assert build_intent(_decision(action), PLAN, "R_100", 1.0).contract_type == ContractType.PUT


def test_hold_or_low_confidence_is_not_traded():
    assert build_intent(_decision(Action.HOLD), PLAN, "R_100", 1.0) is None
    assert build_intent(_decision(confidence=0.64), PLAN, "R_100", 1.0) is None


# ── paper trading ──

def test_win_chance_components():
    intent = build_intent(_decision(confidence=0.8, signal=-1.0, pattern_strength=0.5), PLAN, "R_100", 1.0)
    assert PaperTrader.win_chance(intent) == pytest.approx(0.5 + 0.2 + 0.1)


def test_win_chance_is_clamped():
    hot = build_intent(_decision(confidence=0.95, signal=9.0, regime=RegimeType.STRONG_UPTREND,
                                 pattern_strength=0.9), PLAN, "R_100", 1.0)
    assert PaperTrader.win_chance(hot) == 0.85


def test_high_volatility_regime_lowers_win_chance():
    intent = build_intent(_decision(confidence=0.8, signal=0.0, regime=RegimeType.HIGH_VOLATILITY),
                          PLAN, "R_100", 1.0)
    assert PaperTrader.win_chance(intent) == pytest.approx(0.5 + 0.2 - 0.05)


def test_seeded_settlement_is_reproducible():
    intent = build_intent(_decision(), PLAN, "R_100", 5.0)
    a = PaperTrader(random.Random(7)).settle(intent, now=1.0)
    b = PaperTrader(random.Random(7)).settle(intent, now=1.0)
    assert a == b
    assert a.duration == 90
    if a.result == TradeResult.WIN:
        assert a.profit == pytest.approx(5.0 * (1.75 + 50.0 / 10))
    else:
        assert a.profit == -5.0


# ── history & tracker ──

def test_history_is_newest_first():
    h = TradeHistory()
    h.add(_record(TradeResult.LOSS))
    h.add(_record(TradeResult.WIN))
    assert h.recent_results(1)[0].result == TradeResult.WIN
    assert h.recent_win_rate() == 0.5


def test_history_win_rate_window():
    h = TradeHistory()
    for _ in range(30):
        h.add(_record(TradeResult.WIN))
    for _ in range(20):
        h.add(_record(TradeResult.LOSS))
    assert h.recent_win_rate(20) == 0.0
    assert TradeHistory().recent_win_rate() == 0.5


def test_tracker_counts_and_caps_regime_history():
    t = PerformanceTracker(regime_history=100)
    for i in range(120):
        t.record(_record(TradeResult.WIN if i % 2 else TradeResult.LOSS, profit=1.0))
    assert t.wins == 60 and t.losses == 60
    assert t.total_profit == pytest.approx(120.0)
    assert len(t.regime_history) == 100
    assert t.summary() == "W:60 L:60 WR:50.0% P&L:$+120.00"
    t.reset()
    assert t.total == 0 and not t.regime_history
