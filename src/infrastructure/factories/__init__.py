"""Factories assembling runtime components."""

from .dispatcher_factory import DispatcherFactory

__all__: list[str] = ["DispatcherFactory"]
