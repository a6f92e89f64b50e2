from restarter.control.surface import ControlSurface, MessageType

__all__ = ["ControlSurface", "MessageType"]
