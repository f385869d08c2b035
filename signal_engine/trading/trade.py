from dataclasses import dataclass
from typing import Optional
from ..constants import Action, ContractType, TradeResult
from ..core.engine import Decision
from ..core.expiry import DurationPlan

@dataclass
class TradeRecord:
    time: float
    mode: str                      # "SIMULATION" / "LIVE"
    symbol: str
    amount: float
    decision: str                  # Action value
    result: TradeResult = TradeResult.PENDING
    profit: Optional[float] = None
    confidence: float = 0.0
    regime: str = ""
    duration: int = 0
    contract_id: Optional[str] = None

@dataclass
class TradeIntent:
    symbol: str
    amount: float
    contract_type: ContractType
    duration: int
    duration_unit: str
    decision: Decision

def build_intent(decision: Decision, plan: DurationPlan, symbol: str, stake: float,
                 min_confidence: float = 0.65) -> Optional[TradeIntent]:
    """Turn a decision into an order intent, or None when it should not be traded."""
    if decision.action == Action.HOLD or decision.confidence < min_confidence:
        return None
    contract = ContractType.CALL if decision.action.is_bullish else ContractType.PUT
    return TradeIntent(
        symbol=symbol,
        amount=stake,
        contract_type=contract,
        duration=plan.duration,
        duration_unit="s",
        decision=decision,
    )
