"""Logging helpers."""

from .event_sink import JsonlEventSink, NullEventSink, load_events
from .logger import HumanLogger

__all__ = ["HumanLogger", "JsonlEventSink", "NullEventSink", "load_events"]
