"""Adapters around the core: UI widget binding and the wagering backend client."""
