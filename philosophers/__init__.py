"""Dining philosophers simulations using locks, semaphores and processes."""

__version__ = "0.1.0"