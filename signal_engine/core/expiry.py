import math
from dataclasses import dataclass
from typing import TYPE_CHECKING
from ..constants import RegimeType
from .patterns import CandlePattern
from .regime import MarketRegime

if TYPE_CHECKING:
    from .engine import Decision

@dataclass
class DurationPlan:
    duration: int            # seconds, within [base, 3 * base]
    risk_score: float        # capped at 1.0
    rationale: str

class DurationOptimizer:
    """
    Stretches or shrinks the base contract duration based on:
      • Regime     → strong trends hold longer, volatile/ranging markets shorter
      • Pattern    → a strong candlestick pattern justifies a longer hold
      • Volatility → extreme vol = shorter exposure, quiet market = longer
      • Confidence → high confidence can afford a longer expiry
    Each factor also nudges a 0..1 risk score.
    """

    MAX_MULTIPLE = 3

    @staticmethod
    def plan(decision: "Decision", regime: MarketRegime, volatility: float,
             pattern: CandlePattern, base: int) -> DurationPlan:
        multiplier = 1.0
        risk = 0.5

        # ── 1. Regime ──
        if regime.type.is_strong:
            multiplier, risk = 1.5, 0.3
        elif regime.type == RegimeType.HIGH_VOLATILITY:
            multiplier, risk = 0.7, 0.7
        elif regime.type == RegimeType.CONSOLIDATION:
            multiplier, risk = 0.8, 0.6

        # ── 2. Pattern ──
        if pattern.strength > 0.8:
            multiplier *= 1.2
            risk *= 0.85

        # ── 3. Volatility ──
        if volatility > 0.015:
            multiplier *= 0.8
            risk *= 1.2
        elif volatility < 0.005:
            multiplier *= 1.1
            risk *= 0.9

        # ── 4. Confidence ──
        if decision.confidence > 0.8:
            multiplier *= 1.15
            risk *= 0.9
        elif decision.confidence < 0.6:
            multiplier *= 0.85
            risk *= 1.1

        optimized = math.floor(base * multiplier + 0.5)      # round half up
        duration = max(base, min(optimized, base * DurationOptimizer.MAX_MULTIPLE))

        return DurationPlan(
            duration=int(duration),
            risk_score=min(risk, 1.0),
            rationale=(f"Optimized from {base}s to {duration}s "
                       f"({regime.type.value}, Vol: {volatility * 100:.3f}%)"),
        )
