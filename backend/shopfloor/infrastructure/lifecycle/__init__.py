from .process_restarter import SignalProcessRestarter

__all__ = ["SignalProcessRestarter"]
