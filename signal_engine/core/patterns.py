from dataclasses import dataclass
from typing import Sequence
from ..constants import PatternType, PatternSignal
from ..utils.candle import Candle

@dataclass
class CandlePattern:
    pattern: PatternType = PatternType.NONE
    strength: float = 0.0
    signal: PatternSignal = PatternSignal.NEUTRAL

    @property
    def direction(self) -> float:
        """Signed strength: + bullish, - bearish, 0 otherwise."""
        if self.signal in (PatternSignal.BULLISH, PatternSignal.STRONG_BULLISH):
            return self.strength
        if self.signal in (PatternSignal.BEARISH, PatternSignal.STRONG_BEARISH):
            return -self.strength
        return 0.0

class PatternRecognizer:
    """Looks at the last three candles only. Checks run in a fixed priority
    order and the first match wins."""

    @staticmethod
    def identify(candles: Sequence[Candle]) -> CandlePattern:
        if len(candles) < 3:
            return CandlePattern()

        c1, c2, c3 = candles[-3], candles[-2], candles[-1]
        body2 = c2.body
        body3 = c3.body
        upper_wick3 = c3.high - max(c3.open, c3.close)
        lower_wick3 = min(c3.open, c3.close) - c3.low
        range3 = c3.range

        # ── single-candle ──
        if body3 < range3 * 0.1 and range3 > 0:
            return CandlePattern(PatternType.DOJI, 0.7, PatternSignal.REVERSAL_PENDING)
        if lower_wick3 > body3 * 2 and upper_wick3 < body3 * 0.3 and c3.is_bullish:
            return CandlePattern(PatternType.HAMMER, 0.8, PatternSignal.BULLISH)
        if upper_wick3 > body3 * 2 and lower_wick3 < body3 * 0.3 and c3.is_bearish:
            return CandlePattern(PatternType.SHOOTING_STAR, 0.8, PatternSignal.BEARISH)

        # ── engulfing ──
        if (c2.is_bearish and c3.is_bullish and c3.open < c2.close
                and c3.close > c2.open and body3 > body2 * 1.2):
            return CandlePattern(PatternType.BULLISH_ENGULFING, 0.85, PatternSignal.BULLISH)
        if (c2.is_bullish and c3.is_bearish and c3.open > c2.close
                and c3.close < c2.open and body3 > body2 * 1.2):
            return CandlePattern(PatternType.BEARISH_ENGULFING, 0.85, PatternSignal.BEARISH)

        # ── three-candle runs ──
        if (c1.is_bullish and c2.is_bullish and c3.is_bullish
                and c2.close > c1.close and c3.close > c2.close):
            return CandlePattern(PatternType.THREE_WHITE_SOLDIERS, 0.9, PatternSignal.STRONG_BULLISH)
        if (c1.is_bearish and c2.is_bearish and c3.is_bearish
                and c2.close < c1.close and c3.close < c2.close):
            return CandlePattern(PatternType.THREE_BLACK_CROWS, 0.9, PatternSignal.STRONG_BEARISH)

        return CandlePattern()
