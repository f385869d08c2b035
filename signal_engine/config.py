from dataclasses import dataclass
from typing import Optional

@dataclass
class EngineConfig:
    """All tuneable knobs in one place."""

    # --- market ---
    symbol: str = "R_100"                   # Deriv volatility index
    granularity: int = 60                   # candle period in seconds, also the base duration

    # --- buffers ---
    candles_count: int = 200                # max candle history to keep
    tick_buffer: int = 50                   # ticks kept for micro-structure

    # --- decision loop ---
    auto_interval: float = 10.0             # seconds between evaluation cycles
    min_trade_confidence: float = 0.65      # below this a non-HOLD decision is not traded
    win_rate_window: int = 20               # closed trades feeding the win rate

    # --- money ---
    stake: float = 1.0                      # flat stake per contract

    # --- bookkeeping ---
    regime_history: int = 100               # regime/result pairs kept by the tracker

    # --- mode ---
    live_mode: bool = False                 # False = paper trades via the simulator
    dataset_path: str = ""                  # CSV of candles for replay (optional)
    seed: Optional[int] = None              # paper-trade RNG seed
