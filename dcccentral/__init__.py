"""DCC model railway command station: packets, bit signal, controller state, relays and throttle."""

__version__ = "0.1.0"
__all__ = ["packets", "signal", "state", "relays", "throttle", "station"]