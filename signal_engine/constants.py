from enum import Enum

class Action(Enum):
    HOLD = "HOLD"
    BUY = "BUY"
    SELL = "SELL"
    STRONG_BUY = "STRONG BUY"
    STRONG_SELL = "STRONG SELL"

    @property
    def is_bullish(self) -> bool:
        return self in (Action.BUY, Action.STRONG_BUY)

class ContractType(Enum):
    CALL = "CALL"
    PUT = "PUT"

class TradeResult(Enum):
    WIN = "WIN"
    LOSS = "LOSS"
    PENDING = "PENDING"

class RegimeType(Enum):
    STRONG_UPTREND = "STRONG_UPTREND"
    STRONG_DOWNTREND = "STRONG_DOWNTREND"
    UPTREND = "UPTREND"
    DOWNTREND = "DOWNTREND"
    HIGH_VOLATILITY = "HIGH_VOLATILITY"
    CONSOLIDATION = "CONSOLIDATION"
    NEUTRAL = "NEUTRAL"
    INSUFFICIENT_DATA = "INSUFFICIENT_DATA"

    @property
    def is_strong(self) -> bool:
        return self in (RegimeType.STRONG_UPTREND, RegimeType.STRONG_DOWNTREND)

class PatternType(Enum):
    NONE = "NONE"
    DOJI = "DOJI"
    HAMMER = "HAMMER"
    SHOOTING_STAR = "SHOOTING_STAR"
    BULLISH_ENGULFING = "BULLISH_ENGULFING"
    BEARISH_ENGULFING = "BEARISH_ENGULFING"
    THREE_WHITE_SOLDIERS = "THREE_WHITE_SOLDIERS"
    THREE_BLACK_CROWS = "THREE_BLACK_CROWS"

class PatternSignal(Enum):
    NEUTRAL = "NEUTRAL"
    BULLISH = "BULLISH"
    BEARISH = "BEARISH"
    STRONG_BULLISH = "STRONG_BULLISH"
    STRONG_BEARISH = "STRONG_BEARISH"
    REVERSAL_PENDING = "REVERSAL_PENDING"

class MicroPrediction(Enum):
    UNCERTAIN = "UNCERTAIN"
    BULLISH_CONTINUATION = "BULLISH_CONTINUATION"
    BEARISH_CONTINUATION = "BEARISH_CONTINUATION"
    CONSOLIDATION_LIKELY = "CONSOLIDATION_LIKELY"
    DOJI_FORMING = "DOJI_FORMING"
