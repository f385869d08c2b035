import random
from typing import Optional
from ..constants import RegimeType, TradeResult
from .trade import TradeIntent, TradeRecord

class PaperTrader:
    """Settles trade intents against a regime-aware win probability instead
    of a broker. Draws come from the injected RNG so runs can be seeded."""

    MIN_WIN_CHANCE = 0.3
    MAX_WIN_CHANCE = 0.85

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    @staticmethod
    def win_chance(intent: TradeIntent) -> float:
        d = intent.decision
        chance = 0.5
        chance += d.confidence * 0.25
        chance += abs(d.composite_signal) / 10

        if d.regime is not None:
            if d.regime.type.is_strong:
                chance += 0.1
            elif d.regime.type == RegimeType.HIGH_VOLATILITY:
                chance -= 0.05

        if d.indicators is not None and d.indicators.pattern.strength > 0.75:
            chance += 0.08

        return max(PaperTrader.MIN_WIN_CHANCE, min(PaperTrader.MAX_WIN_CHANCE, chance))

    def settle(self, intent: TradeIntent, now: float) -> TradeRecord:
        d = intent.decision
        vol_factor = d.indicators.volatility * 100 if d.indicators is not None else 0.0
        win = self.rng.random() < self.win_chance(intent)
        payout = (1.75 + vol_factor / 10) if win else -1.0

        return TradeRecord(
            time=now,
            mode="SIMULATION",
            symbol=intent.symbol,
            amount=intent.amount,
            decision=d.action.value,
            result=TradeResult.WIN if win else TradeResult.LOSS,
            profit=intent.amount * payout,
            confidence=d.confidence,
            regime=d.regime.type.value if d.regime is not None else "",
            duration=intent.duration,
        )
