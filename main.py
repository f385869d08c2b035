import os
import sys
from signal_engine.bot import SignalBot
from signal_engine.config import EngineConfig
from signal_engine.utils.candle import load_candles_csv

def main():
    # --- Load config from env or defaults ---
    seed = os.environ.get("SE_SEED", "").strip()
    cfg = EngineConfig(
        symbol=os.environ.get("SE_SYMBOL", "R_100"),
        granularity=int(os.environ.get("SE_GRANULARITY", "60")),
        candles_count=int(os.environ.get("SE_CANDLES", "200")),
        stake=float(os.environ.get("SE_STAKE", "1.0")),
        min_trade_confidence=float(os.environ.get("SE_MIN_CONF", "0.65")),
        dataset_path=os.environ.get("SE_DATASET", ""),
        seed=int(seed) if seed else None,
    )

    if not cfg.dataset_path:
        print("=" * 60)
        print("  ERROR: No dataset provided!")
        print()
        print("  Point SE_DATASET at a CSV of candles to replay:")
        print("    export SE_DATASET=./R_100_M1.csv")
        print("=" * 60)
        sys.exit(1)

    candles = load_candles_csv(cfg.dataset_path)
    bot = SignalBot(cfg)
    bot.replay(candles)
    print(bot.perf.summary())

if __name__ == "__main__":
    main()
