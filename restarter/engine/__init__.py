from restarter.engine.apply import ApplySequence
from restarter.engine.reset_engine import ResetEngine

__all__ = ["ApplySequence", "ResetEngine"]
