import numpy as np
from dataclasses import dataclass
from typing import Optional, Sequence
from ..constants import MicroPrediction
from ..utils.candle import Candle, Tick

MIN_TICKS = 10
WINDOW = 20

@dataclass
class MicroStructure:
    momentum: float = 0.0
    volatility: float = 0.0        # tick stdev / average tick price
    prediction: MicroPrediction = MicroPrediction.UNCERTAIN
    confidence: float = 0.0

class MicroStructureAnalyzer:
    """Short-horizon read of the tick buffer, finer than the candle indicators."""

    @staticmethod
    def analyze(ticks: Sequence[Tick], current: Optional[Candle]) -> MicroStructure:
        if len(ticks) < MIN_TICKS:
            return MicroStructure()

        recent = list(ticks)[-WINDOW:]
        prices = np.array([t.price for t in recent], dtype=np.float64)
        avg_price = float(np.mean(prices))
        first, last = float(prices[0]), float(prices[-1])

        momentum = (last - first) / first if first else 0.0
        micro_vol = float(np.std(prices))
        vol_ratio = micro_vol / avg_price if avg_price else 0.0

        if vol_ratio > 0.001 and momentum > 0.0005:
            prediction = MicroPrediction.BULLISH_CONTINUATION
        elif vol_ratio > 0.001 and momentum < -0.0005:
            prediction = MicroPrediction.BEARISH_CONTINUATION
        elif vol_ratio < 0.0003:
            prediction = MicroPrediction.CONSOLIDATION_LIKELY
        elif current is not None and current.body < current.range * 0.2:
            prediction = MicroPrediction.DOJI_FORMING
        else:
            prediction = MicroPrediction.UNCERTAIN

        return MicroStructure(
            momentum=momentum,
            volatility=vol_ratio,
            prediction=prediction,
            confidence=min(len(recent) / WINDOW, 1.0),
        )
