from collections import deque
from typing import Iterable, Optional
from ..config import EngineConfig
from ..utils.candle import Candle, Tick, parse_candle, parse_tick
from ..utils.logger import log

class MarketData:
    """Rolling candle series plus the tick ring buffer fed by the transport."""

    def __init__(self, cfg: EngineConfig):
        self.cfg = cfg
        self.candles: deque[Candle] = deque(maxlen=cfg.candles_count)
        self.ticks: deque[Tick] = deque(maxlen=cfg.tick_buffer)

    @property
    def last_candle(self) -> Optional[Candle]:
        return self.candles[-1] if self.candles else None

    def load_history(self, raw_candles: Iterable) -> int:
        """Replace the candle series with a fresh history batch."""
        parsed: dict[int, Candle] = {}
        for raw in raw_candles:
            try:
                c = parse_candle(raw)
            except (ValueError, TypeError, KeyError, IndexError) as e:
                log.warning("Skipping malformed candle %r: %s", raw, e)
                continue
            parsed[c.timestamp] = c            # later duplicates win
        self.candles.clear()
        self.candles.extend(parsed[ts] for ts in sorted(parsed))
        log.info("Candles data refreshed - %d candles", len(self.candles))
        return len(self.candles)

    def append_candle(self, raw) -> bool:
        """Append a closed candle if it is newer than the last one."""
        c = parse_candle(raw)
        if self.candles and c.timestamp <= self.candles[-1].timestamp:
            return False
        self.candles.append(c)
        return True

    def on_tick(self, raw) -> bool:
        """Store a tick; opens a new candle once the current period is over.
        Returns True when a candle was appended."""
        try:
            tick = parse_tick(raw)
        except (ValueError, TypeError, KeyError, IndexError) as e:
            log.warning("Skipping malformed tick %r: %s", raw, e)
            return False
        self.ticks.append(tick)

        last = self.last_candle
        if last is not None and tick.timestamp > last.timestamp + self.cfg.granularity:
            self.candles.append(Candle(
                timestamp=tick.timestamp,
                open=tick.price, high=tick.price, low=tick.price, close=tick.price,
            ))
            return True
        return False

    def reset_ticks(self):
        """Symbol or granularity changed; old ticks no longer apply."""
        self.ticks.clear()
