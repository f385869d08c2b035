import math
import threading
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence
from ..constants import Action, MicroPrediction, TradeResult
from ..utils.candle import Candle, Tick, parse_candle, parse_tick
from ..utils.logger import log
from .expiry import DurationOptimizer, DurationPlan
from .indicators import Band, Indicators
from .microstructure import MicroStructure, MicroStructureAnalyzer
from .patterns import CandlePattern, PatternRecognizer
from .regime import MIN_CANDLES, MarketRegime, RegimeDetector
from .weights import AdaptiveWeighting, IndicatorWeights

WIN_RATE_WINDOW = 20
MACD_WEIGHT = 0.8
MICRO_WEIGHT = 0.6
MIN_VOLATILITY = 0.002          # raw stdev of closes, absolute price units
MAX_CONFIDENCE = 0.95

@dataclass
class IndicatorSnapshot:
    ma14: Optional[float]
    ma50: Optional[float]
    rsi: Optional[float]
    bb: Band
    volatility: float
    atr: Optional[float]
    macd: float
    pattern: CandlePattern
    micro: MicroStructure

@dataclass
class Decision:
    action: Action
    reason: str
    confidence: float = 0.0
    composite_signal: float = 0.0
    indicators: Optional[IndicatorSnapshot] = None
    regime: Optional[MarketRegime] = None
    weights: Optional[IndicatorWeights] = None
    duration: Optional[DurationPlan] = None

    def summary(self) -> str:
        return (f"{self.action.value} — {self.reason} "
                f"(Confidence: {self.confidence:.0%} | Signal: {self.composite_signal:.2f})")

def _hold(reason: str) -> Decision:
    return Decision(action=Action.HOLD, reason=reason)

@dataclass
class EngineState:
    """Mutable state carried between cycles. The caller owns it and passes it
    into every evaluation; only one cycle may run against it at a time."""
    weights: IndicatorWeights = field(default_factory=IndicatorWeights)
    regime: MarketRegime = field(default_factory=MarketRegime)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def reset(self):
        self.weights = IndicatorWeights()
        self.regime = MarketRegime()

def _result_of(record: Any) -> str:
    if isinstance(record, TradeResult):
        return record.value
    if isinstance(record, dict):
        record = record.get("result")
    else:
        record = getattr(record, "result", record)
    if isinstance(record, TradeResult):
        return record.value
    return str(record or "").upper()

def recent_win_rate(results: Sequence[Any], window: int = WIN_RATE_WINDOW) -> float:
    """Share of WINs among the newest ``window`` records (newest first).
    Every record counts, whatever its outcome or symbol."""
    recent = list(results)[:window]
    if not recent:
        return 0.5
    wins = sum(1 for r in recent if _result_of(r) == TradeResult.WIN.value)
    return wins / len(recent)

def _sanitize(candles: Sequence[Any]) -> Optional[list[Candle]]:
    try:
        parsed = [parse_candle(c) for c in candles]
    except (ValueError, TypeError, KeyError, IndexError) as e:
        log.warning("Malformed candle input: %s", e)
        return None
    if not all(c.is_finite() for c in parsed):
        log.warning("Non-finite candle values in input")
        return None
    if any(b.timestamp <= a.timestamp for a, b in zip(parsed, parsed[1:])):
        log.warning("Candle timestamps are not strictly increasing")
        return None
    return parsed

def _clean_ticks(ticks: Sequence[Any]) -> list[Tick]:
    out: list[Tick] = []
    for raw in ticks:
        try:
            t = parse_tick(raw)
        except (ValueError, TypeError, KeyError, IndexError):
            continue
        if math.isfinite(t.price):
            out.append(t)
    return out

class DecisionEngine:
    """Fuses indicators, regime, adaptive weights, candle pattern and tick
    micro-structure into a composite signal, a confidence and an action."""

    @staticmethod
    def evaluate(state: EngineState, candles: Sequence[Any], ticks: Sequence[Any] = (),
                 recent_results: Sequence[Any] = (),
                 base_granularity: Optional[int] = None,
                 win_rate_window: int = WIN_RATE_WINDOW) -> Decision:
        if not state._lock.acquire(blocking=False):
            log.warning("Evaluation already in progress — trigger dropped")
            return _hold("Evaluation already in progress")
        try:
            return DecisionEngine._cycle(state, candles, ticks, recent_results,
                                        base_granularity, win_rate_window)
        finally:
            state._lock.release()

    @staticmethod
    def _cycle(state: EngineState, candles: Sequence[Any], ticks: Sequence[Any],
               recent_results: Sequence[Any], base_granularity: Optional[int],
               win_rate_window: int) -> Decision:
        if not candles or len(candles) < MIN_CANDLES:
            return _hold("Insufficient data")
        series = _sanitize(candles)
        if series is None:
            return _hold("Insufficient data")

        closes = [c.close for c in series]
        ma14 = Indicators.ma(closes, 14)
        ma50 = Indicators.ma(closes, 50)
        rsi = Indicators.rsi(closes, 14)
        bb = Indicators.bollinger(closes, 20, 2)
        macd = Indicators.macd(closes)
        volatility = Indicators.volatility(closes, 20)
        atr = Indicators.atr(series, 14)

        # Regime and weights are rebuilt from scratch every cycle
        state.regime = RegimeDetector.detect(series)
        win_rate = recent_win_rate(recent_results, win_rate_window)
        state.weights = AdaptiveWeighting.update(state.regime.type, win_rate)
        weights = state.weights
        regime = state.regime

        pattern = PatternRecognizer.identify(series)
        micro = MicroStructureAnalyzer.analyze(_clean_ticks(ticks), series[-1])

        i = len(closes) - 1
        price = closes[i]
        prev_price = closes[i - 1]
        ma14_now = ma14[i]
        rsi_raw = rsi[i]
        bb_now = bb[i]

        if ma14_now is None or rsi_raw is None or bb_now.upper is None:
            return _hold("Indicators not ready")

        # a zero RSI reads as neutral
        rsi_now = rsi_raw or 50.0

        snapshot = IndicatorSnapshot(
            ma14=ma14_now,
            ma50=ma50[i],
            rsi=rsi_now,
            bb=bb_now,
            volatility=volatility,
            atr=atr[i],
            macd=macd.histogram[i],
            pattern=pattern,
            micro=micro,
        )

        # ── weighted votes ──
        trend_signal = (1 if price > ma14_now else -1) * weights.ma
        momentum = (price - prev_price) / prev_price * 1000 if prev_price else 0.0
        momentum_signal = momentum * weights.momentum
        if rsi_now < 30:
            rsi_vote = 1
        elif rsi_now > 70:
            rsi_vote = -1
        else:
            rsi_vote = 0
        rsi_signal = rsi_vote * weights.rsi
        if price <= bb_now.lower:
            bb_vote = 1
        elif price >= bb_now.upper:
            bb_vote = -1
        else:
            bb_vote = 0
        bb_signal = bb_vote * weights.bb
        macd_signal = (1 if snapshot.macd > 0 else -1) * MACD_WEIGHT
        pattern_signal = pattern.direction
        if micro.prediction == MicroPrediction.BULLISH_CONTINUATION:
            micro_signal = MICRO_WEIGHT
        elif micro.prediction == MicroPrediction.BEARISH_CONTINUATION:
            micro_signal = -MICRO_WEIGHT
        else:
            micro_signal = 0.0

        composite = (trend_signal + momentum_signal + rsi_signal + bb_signal
                     + macd_signal + pattern_signal + micro_signal)

        # ── confidence ──
        confidence = min(abs(composite) / 5, 1.0)
        confidence *= regime.confidence
        if pattern.strength > 0.7:
            confidence *= 1.15
        if win_rate > 0.6:
            confidence *= 1.1
        elif win_rate < 0.4:
            confidence *= 0.85
        confidence = min(confidence, MAX_CONFIDENCE)

        decision = Decision(
            action=Action.HOLD,
            reason="No clear signal",
            confidence=confidence,
            composite_signal=composite,
            indicators=snapshot,
            regime=regime,
            weights=weights.copy(),
        )

        # Compares the raw stdev, not the price-normalized ratio the regime uses
        if volatility < MIN_VOLATILITY:
            decision.reason = "Extremely low volatility - no edge"
            decision.confidence = 0.0
            return decision

        tag = f"{regime.type.value} | {pattern.pattern.value}"
        if composite > 2.5 and confidence > 0.65:
            decision.action = Action.STRONG_BUY if composite > 4 else Action.BUY
            decision.reason = f"Bullish composite signal ({composite:.2f}) | {tag}"
        elif composite < -2.5 and confidence > 0.65:
            decision.action = Action.STRONG_SELL if composite < -4 else Action.SELL
            decision.reason = f"Bearish composite signal ({composite:.2f}) | {tag}"
        elif abs(composite) > 1.5 and confidence > 0.7:
            decision.action = Action.BUY if composite > 0 else Action.SELL
            decision.reason = (f"Moderate {'bullish' if composite > 0 else 'bearish'} "
                               f"signal with high confidence")
        else:
            decision.reason = (f"Insufficient signal strength ({composite:.2f}) "
                               f"or confidence ({confidence * 100:.0f}%)")

        if base_granularity and decision.action != Action.HOLD:
            decision.duration = DurationOptimizer.plan(
                decision, regime, volatility, pattern, base_granularity,
            )
        return decision
