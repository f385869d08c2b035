import numpy as np
from dataclasses import dataclass
from typing import Optional, Sequence
from ..utils.candle import Candle

Series = list[Optional[float]]

@dataclass
class Band:
    upper: Optional[float] = None
    middle: Optional[float] = None
    lower: Optional[float] = None

@dataclass
class MACD:
    macd_line: list[float]
    signal_line: list[float]
    histogram: list[float]

class Indicators:
    """Classic indicators over a close (or candle) series.

    Every series-valued function is index-aligned with its input: the
    output has the same length and ``None`` marks the warm-up indices.
    """

    @staticmethod
    def ma(values: Sequence[float], period: int = 14) -> Series:
        data = np.asarray(values, dtype=np.float64)
        out: Series = []
        for i in range(len(data)):
            if i < period - 1:
                out.append(None)
                continue
            out.append(float(np.mean(data[i - period + 1:i + 1])))
        return out

    @staticmethod
    def ema(values: Sequence[float], period: int = 14) -> list[float]:
        k = 2.0 / (period + 1)
        out: list[float] = []
        for i, v in enumerate(values):
            if i == 0:
                out.append(float(v))
            else:
                out.append(float(v) * k + out[i - 1] * (1 - k))
        return out

    @staticmethod
    def rsi(values: Sequence[float], period: int = 14) -> Series:
        """Wilder-smoothed RSI; first value lands at index ``period``."""
        n = len(values)
        out: Series = [None] * n
        if n <= period:
            return out

        deltas = np.diff(np.asarray(values, dtype=np.float64))
        gains = np.maximum(deltas, 0.0)
        losses = np.maximum(-deltas, 0.0)

        avg_gain = float(np.sum(gains[:period])) / period
        avg_loss = float(np.sum(losses[:period])) / period
        out[period] = Indicators._rsi_value(avg_gain, avg_loss)

        for i in range(period + 1, n):
            avg_gain = (avg_gain * (period - 1) + float(gains[i - 1])) / period
            avg_loss = (avg_loss * (period - 1) + float(losses[i - 1])) / period
            out[i] = Indicators._rsi_value(avg_gain, avg_loss)
        return out

    @staticmethod
    def _rsi_value(avg_gain: float, avg_loss: float) -> float:
        if avg_loss == 0:
            return 100.0
        return 100.0 - 100.0 / (1.0 + avg_gain / avg_loss)

    @staticmethod
    def bollinger(values: Sequence[float], period: int = 20, mult: float = 2.0) -> list[Band]:
        data = np.asarray(values, dtype=np.float64)
        out: list[Band] = []
        for i in range(len(data)):
            if i < period - 1:
                out.append(Band())
                continue
            window = data[i - period + 1:i + 1]
            mean = float(np.mean(window))
            std = float(np.std(window))          # population
            out.append(Band(upper=mean + mult * std, middle=mean, lower=mean - mult * std))
        return out

    @staticmethod
    def volatility(closes: Sequence[float], period: int = 20) -> float:
        """Population stdev of the last ``period`` closes (not index-aligned)."""
        if len(closes) < period:
            return 0.0
        window = np.asarray(closes[-period:], dtype=np.float64)
        return float(np.std(window))

    @staticmethod
    def macd(values: Sequence[float], fast: int = 12, slow: int = 26, signal: int = 9) -> MACD:
        ema_fast = Indicators.ema(values, fast)
        ema_slow = Indicators.ema(values, slow)
        macd_line = [f - s for f, s in zip(ema_fast, ema_slow)]
        signal_line = Indicators.ema(macd_line, signal)
        histogram = [m - s for m, s in zip(macd_line, signal_line)]
        return MACD(macd_line=macd_line, signal_line=signal_line, histogram=histogram)

    @staticmethod
    def atr(candles: Sequence[Candle], period: int = 14) -> Series:
        n = len(candles)
        if n < period + 1:
            return [None] * n

        tr: list[float] = []
        for i in range(1, n):
            high, low = candles[i].high, candles[i].low
            prev_close = candles[i - 1].close
            tr.append(max(high - low, abs(high - prev_close), abs(low - prev_close)))

        out: Series = [None] * (period + 1)
        atr = sum(tr[:period]) / period
        out[period] = atr
        for i in range(period, len(tr)):
            atr = (atr * (period - 1) + tr[i]) / period
            out.append(atr)
        return out
