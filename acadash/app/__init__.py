"""Composition helpers: adapter wiring, timers and the shared value store."""
