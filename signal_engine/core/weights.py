from dataclasses import dataclass, replace
from ..constants import RegimeType
from ..utils.logger import log

@dataclass
class IndicatorWeights:
    ma: float = 1.0
    rsi: float = 1.0
    bb: float = 1.0
    momentum: float = 1.0
    volume: float = 1.0

    def scaled(self, factor: float) -> "IndicatorWeights":
        return IndicatorWeights(
            ma=self.ma * factor,
            rsi=self.rsi * factor,
            bb=self.bb * factor,
            momentum=self.momentum * factor,
            volume=self.volume * factor,
        )

    def copy(self) -> "IndicatorWeights":
        return replace(self)

    def status_line(self) -> str:
        return f"MA:{self.ma:.2f} RSI:{self.rsi:.2f} BB:{self.bb:.2f} MOM:{self.momentum:.2f}"

# Base multipliers per regime; regimes not listed keep the 1.0 defaults.
REGIME_TABLE: dict[RegimeType, dict[str, float]] = {
    RegimeType.STRONG_UPTREND:   {"ma": 1.3, "momentum": 1.4, "rsi": 0.8, "bb": 0.9},
    RegimeType.STRONG_DOWNTREND: {"ma": 1.3, "momentum": 1.4, "rsi": 0.8, "bb": 0.9},
    RegimeType.HIGH_VOLATILITY:  {"ma": 0.7, "momentum": 1.1, "rsi": 1.2, "bb": 1.5},
    RegimeType.CONSOLIDATION:    {"ma": 0.6, "momentum": 0.5, "rsi": 1.4, "bb": 1.3},
}

HOT_WIN_RATE = 0.65
COLD_WIN_RATE = 0.45

class AdaptiveWeighting:
    """
    Re-derives the indicator weights from scratch every cycle:
      • Regime     → table lookup sets the base multipliers
      • Win rate   → hot streak amplifies all weights, cold streak damps them
    Nothing carries over from the previous cycle.
    """

    @staticmethod
    def update(regime: RegimeType, win_rate: float) -> IndicatorWeights:
        weights = IndicatorWeights(**REGIME_TABLE.get(regime, {}))

        if win_rate > HOT_WIN_RATE:
            weights = weights.scaled(1.1)
        elif win_rate < COLD_WIN_RATE:
            weights = weights.scaled(0.85)

        log.debug("Weights for %s (WR %.0f%%): %s", regime.value, win_rate * 100,
                  weights.status_line())
        return weights
