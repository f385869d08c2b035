from collections import deque
from typing import Optional
from ..constants import TradeResult
from ..core.engine import recent_win_rate
from .trade import TradeRecord

class TradeHistory:
    """Closed and pending trades, newest first."""

    def __init__(self):
        self.records: list[TradeRecord] = []

    def __len__(self):
        return len(self.records)

    def add(self, record: TradeRecord):
        self.records.insert(0, record)

    def find(self, contract_id: str) -> Optional[TradeRecord]:
        for r in self.records:
            if r.contract_id == contract_id:
                return r
        return None

    def recent_results(self, n: int = 20) -> list[TradeRecord]:
        return self.records[:n]

    def recent_win_rate(self, n: int = 20) -> float:
        return recent_win_rate(self.records, n)

    def clear(self):
        self.records.clear()

class PerformanceTracker:
    def __init__(self, regime_history: int = 100):
        self.wins = 0
        self.losses = 0
        self.total_profit = 0.0
        self.regime_history: deque[dict] = deque(maxlen=regime_history)

    @property
    def total(self):
        return self.wins + self.losses

    @property
    def win_rate(self):
        return self.wins / self.total if self.total > 0 else 0.5

    def record(self, record: TradeRecord):
        if record.result == TradeResult.WIN:
            self.wins += 1
        elif record.result == TradeResult.LOSS:
            self.losses += 1
        if record.profit is not None:
            self.total_profit += record.profit

        self.regime_history.append({
            "time": record.time,
            "regime": record.regime,
            "result": record.result.value,
        })

    def reset(self):
        self.wins = 0
        self.losses = 0
        self.total_profit = 0.0
        self.regime_history.clear()

    def summary(self) -> str:
        return (
            f"W:{self.wins} L:{self.losses} "
            f"WR:{self.win_rate:.1%} "
            f"P&L:${self.total_profit:+.2f}"
        )
