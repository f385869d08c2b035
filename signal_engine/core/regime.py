from dataclasses import dataclass
from typing import Optional, Sequence
from ..constants import RegimeType
from ..utils.candle import Candle
from .indicators import Indicators

MIN_CANDLES = 50

@dataclass
class MarketRegime:
    type: RegimeType = RegimeType.INSUFFICIENT_DATA
    volatility: float = 0.0          # stdev / price
    trend: float = 0.0               # (MA20 - MA50) / MA50
    confidence: float = 0.0
    atr: Optional[float] = None

class RegimeDetector:
    @staticmethod
    def detect(candles: Sequence[Candle]) -> MarketRegime:
        """Classify the market from the whole candle series.
        Pure function of its input: nothing is remembered between calls."""
        if len(candles) < MIN_CANDLES:
            return MarketRegime()

        closes = [c.close for c in candles]
        volatility = Indicators.volatility(closes, 20)
        ma20 = Indicators.ma(closes, 20)[-1]
        ma50 = Indicators.ma(closes, 50)[-1]
        atr = Indicators.atr(candles, 14)[-1]
        price = closes[-1]

        trend = (ma20 - ma50) / ma50 if ma20 and ma50 else 0.0
        vol_pct = volatility / price if price else 0.0

        is_high_vol = vol_pct > 0.01
        is_low_vol = vol_pct < 0.003

        if abs(trend) > 0.02 and not is_low_vol:
            regime = RegimeType.STRONG_UPTREND if trend > 0 else RegimeType.STRONG_DOWNTREND
            confidence = 0.85
        elif abs(trend) > 0.01:
            regime = RegimeType.UPTREND if trend > 0 else RegimeType.DOWNTREND
            confidence = 0.70
        elif is_high_vol:
            regime, confidence = RegimeType.HIGH_VOLATILITY, 0.60
        elif is_low_vol:
            regime, confidence = RegimeType.CONSOLIDATION, 0.65
        else:
            regime, confidence = RegimeType.NEUTRAL, 0.50

        return MarketRegime(
            type=regime,
            volatility=vol_pct,
            trend=trend,
            confidence=confidence,
            atr=atr,
        )
