import asyncio
import random
import time
from typing import Callable, Iterable, Optional

from .config import EngineConfig
from .constants import Action, TradeResult
from .core.engine import Decision, DecisionEngine, EngineState
from .core.regime import MIN_CANDLES
from .trading.market import MarketData
from .trading.performance import PerformanceTracker, TradeHistory
from .trading.simulator import PaperTrader
from .trading.trade import TradeIntent, TradeRecord, build_intent
from .utils.logger import log

# Live-mode hook: places the order, returns the broker's contract id.
Dispatcher = Callable[[TradeIntent], Optional[str]]

# Broker contract statuses ("won"/"lost"/"open" on Deriv)
CONTRACT_STATUS = {
    "WON": TradeResult.WIN,
    "WIN": TradeResult.WIN,
    "LOST": TradeResult.LOSS,
    "LOSS": TradeResult.LOSS,
    "OPEN": TradeResult.PENDING,
    "PENDING": TradeResult.PENDING,
}


class SignalBot:
    def __init__(self, cfg: EngineConfig, dispatcher: Optional[Dispatcher] = None,
                 rng: Optional[random.Random] = None):
        self.cfg = cfg
        self.market = MarketData(cfg)
        self.state = EngineState()
        self.history = TradeHistory()
        self.perf = PerformanceTracker(cfg.regime_history)
        self.paper = PaperTrader(rng or random.Random(cfg.seed))
        self.dispatcher = dispatcher
        self.trades_made = 0
        self._running = False

    # ------------------------------------------------------------------
    def check(self, now: Optional[float] = None) -> Decision:
        """One full decision cycle: evaluate, size the duration, trade."""
        now = time.time() if now is None else now
        candles = list(self.market.candles)
        if len(candles) < MIN_CANDLES:
            log.info("⏸ Insufficient candle data for decision (%d/%d)", len(candles), MIN_CANDLES)

        d = DecisionEngine.evaluate(
            self.state, candles, list(self.market.ticks),
            self.history.records, self.cfg.granularity, self.cfg.win_rate_window,
        )
        log.info("Decision: %s", d.summary())

        if d.action == Action.HOLD or d.confidence < self.cfg.min_trade_confidence:
            return d
        if d.duration is None:
            return d

        intent = build_intent(d, d.duration, self.cfg.symbol, self.cfg.stake,
                              self.cfg.min_trade_confidence)
        if intent is None:
            return d

        log.info("▶ TRADE  %s  %.2f  %s  duration=%ds  %s",
                 intent.contract_type.value, intent.amount, d.action.value,
                 intent.duration, d.duration.rationale)

        if self.cfg.live_mode:
            self._dispatch(intent, now)
        else:
            self._simulate(intent, now)
        return d

    def _simulate(self, intent: TradeIntent, now: float):
        rec = self.paper.settle(intent, now)
        self._record(rec)
        self.trades_made += 1
        log.info("Simulated %s on %s → %s (%.2f) [Conf: %.0f%%]",
                 rec.decision, rec.symbol, rec.result.value, rec.profit,
                 rec.confidence * 100)

    def _dispatch(self, intent: TradeIntent, now: float):
        if self.dispatcher is None:
            log.warning("Live mode without a dispatcher — %s not sent", intent.contract_type.value)
            return
        contract_id = self.dispatcher(intent)
        d = intent.decision
        rec = TradeRecord(
            time=now,
            mode="LIVE",
            symbol=intent.symbol,
            amount=intent.amount,
            decision=d.action.value,
            confidence=d.confidence,
            regime=d.regime.type.value if d.regime is not None else "",
            duration=intent.duration,
            contract_id=contract_id,
        )
        self.history.add(rec)
        self.trades_made += 1
        log.info("Live order sent - Contract ID: %s", contract_id)

    def _record(self, rec: TradeRecord):
        self.history.add(rec)
        self.perf.record(rec)

    def on_contract_update(self, contract_id: str, status: str, profit: Optional[float] = None) -> bool:
        """Settle a live contract once the broker reports its outcome."""
        rec = self.history.find(contract_id)
        if rec is None:
            return False
        result = CONTRACT_STATUS.get(str(status).upper())
        if result is None:
            log.warning("Unknown contract status %r for %s", status, contract_id)
            return False
        settled = rec.result != TradeResult.PENDING
        rec.result = result
        if profit is not None:
            rec.profit = float(profit)
        if not settled and result != TradeResult.PENDING:
            self.perf.record(rec)
        log.info("Contract %s updated: %s (%.2f)", contract_id, rec.result.value, rec.profit or 0.0)
        return True

    # ------------------------------------------------------------------
    def replay(self, candles: Iterable) -> int:
        """Feed a historical series one candle at a time, evaluating after each."""
        for raw in candles:
            if self.market.append_candle(raw):
                self.check(now=float(self.market.last_candle.timestamp))
        log.info("Replay finished.  %d trades  |  %s", self.trades_made, self.perf.summary())
        return self.trades_made

    # ------------------------------------------------------------------
    async def run(self):
        """Evaluate every ``auto_interval`` seconds until stopped.
        Cycles run back to back in this one coroutine, so they never overlap."""
        self._running = True
        log.info("Auto trading activated on %s (%ds candles)", self.cfg.symbol, self.cfg.granularity)
        while self._running:
            try:
                self.check()
            except Exception as e:
                log.error("Decision loop error: %s", e, exc_info=True)
            await asyncio.sleep(self.cfg.auto_interval)

    def stop(self):
        self._running = False
        log.info("Auto trading deactivated.  Final stats: %s", self.perf.summary())
