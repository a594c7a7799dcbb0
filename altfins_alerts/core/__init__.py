# Core business logic
from .monitor import Monitor
from .price_monitor import PriceDecision, PriceMonitor, evaluate_price
from .signal_monitor import SignalMonitor, advance, select_new_signals

__all__ = [
    "Monitor",
    "PriceDecision",
    "PriceMonitor",
    "evaluate_price",
    "SignalMonitor",
    "advance",
    "select_new_signals",
]
