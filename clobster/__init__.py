"""Configuration, state, an action store, key-binding handling and API models for a Polymarket terminal interface."""

__version__ = "0.1.0"