import csv
import math
from dataclasses import dataclass
from datetime import datetime as dt

from .logger import log

@dataclass
class Candle:
    timestamp: int
    open: float
    high: float
    low: float
    close: float

    @property
    def body(self) -> float:
        return abs(self.close - self.open)

    @property
    def range(self) -> float:
        return self.high - self.low

    @property
    def is_bullish(self) -> bool:
        return self.close > self.open

    @property
    def is_bearish(self) -> bool:
        return self.close < self.open

    def is_finite(self) -> bool:
        return all(math.isfinite(v) for v in (self.open, self.high, self.low, self.close))

@dataclass
class Tick:
    timestamp: int
    price: float

def _ts(value) -> int:
    return int(float(value or 0))

def _price(value, name: str) -> float:
    if value is None:
        raise ValueError(f"candle is missing {name}")
    return float(value)

def parse_candle(raw) -> Candle:
    """Flexible candle parser: handles dict, list, or object.
    Deriv sends {"epoch", "open", "high", "low", "close"}.
    A missing or null price raises ValueError."""
    if isinstance(raw, Candle):
        return raw
    if isinstance(raw, dict):
        return Candle(
            timestamp=_ts(raw.get("epoch", raw.get("time", raw.get("timestamp", 0)))),
            open=_price(raw.get("open"), "open"),
            high=_price(raw.get("high"), "high"),
            low=_price(raw.get("low"), "low"),
            close=_price(raw.get("close"), "close"),
        )
    elif isinstance(raw, (list, tuple)):
        return Candle(
            timestamp=_ts(raw[0]),
            open=float(raw[1]),
            high=float(raw[2]),
            low=float(raw[3]),
            close=float(raw[4]),
        )
    else:
        return Candle(
            timestamp=_ts(getattr(raw, "epoch", getattr(raw, "timestamp", 0))),
            open=_price(getattr(raw, "open", None), "open"),
            high=_price(getattr(raw, "high", None), "high"),
            low=_price(getattr(raw, "low", None), "low"),
            close=_price(getattr(raw, "close", None), "close"),
        )

def parse_tick(raw) -> Tick:
    """Deriv tick payload: {"epoch": ..., "quote": ...}."""
    if isinstance(raw, Tick):
        return raw
    if isinstance(raw, dict):
        return Tick(
            timestamp=_ts(raw.get("epoch", raw.get("timestamp", 0))),
            price=float(raw.get("quote", raw.get("price"))),
        )
    if isinstance(raw, (list, tuple)):
        return Tick(timestamp=_ts(raw[0]), price=float(raw[1]))
    return Tick(
        timestamp=_ts(getattr(raw, "epoch", getattr(raw, "timestamp", 0))),
        price=float(getattr(raw, "quote", getattr(raw, "price", None))),
    )

def load_candles_csv(path: str) -> list[Candle]:
    """Load candles from a CSV file.
    Supports:
      - Standard CSV with headers (time/epoch,open,high,low,close)
      - HistData semicolon format: YYYYMMDD HHMMSS;O;H;L;C;V (no headers)
    """
    candles: list[Candle] = []
    skipped = 0

    with open(path, "r", encoding="utf-8-sig") as f:
        first_line = f.readline().strip()
        f.seek(0)

        if ";" in first_line and not any(
            h in first_line.lower() for h in ["time", "open", "high", "date", "epoch"]
        ):
            log.info("Detected HistData semicolon format (no headers)")
            for line in f:
                line = line.strip()
                if not line:
                    continue
                try:
                    parts = line.split(";")
                    time_str = parts[0].strip()
                    if len(time_str) >= 15:
                        parsed = dt.strptime(time_str, "%Y%m%d %H%M%S")
                    else:
                        parsed = dt.strptime(time_str[:8], "%Y%m%d")
                    candles.append(Candle(
                        timestamp=int(parsed.timestamp()),
                        open=float(parts[1]),
                        high=float(parts[2]),
                        low=float(parts[3]),
                        close=float(parts[4]),
                    ))
                except (ValueError, TypeError, IndexError):
                    skipped += 1
        else:
            delimiter = ";" if ";" in first_line else ","
            reader = csv.DictReader(f, delimiter=delimiter)
            for row in reader:
                try:
                    time_str = str(row.get("epoch") or row.get("time") or row.get("timestamp")
                                   or row.get("date") or "").strip()
                    if "-" in time_str and ":" in time_str:
                        ts = int(dt.strptime(time_str, "%Y-%m-%d %H:%M:%S").timestamp())
                    elif time_str:
                        ts = int(float(time_str))
                    else:
                        skipped += 1
                        continue
                    candles.append(Candle(
                        timestamp=ts,
                        open=float(row.get("open") or row.get("Open")),
                        high=float(row.get("high") or row.get("High")),
                        low=float(row.get("low") or row.get("Low")),
                        close=float(row.get("close") or row.get("Close")),
                    ))
                except (ValueError, TypeError, KeyError):
                    skipped += 1

    if skipped:
        log.warning("Skipped %d unparsable rows in %s", skipped, path)
    log.info("Parsed %d candles from %s", len(candles), path)
    return candles
