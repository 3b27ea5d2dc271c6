"""Infrastructure Layer.

Persistence adapters for the domain repository interfaces.
"""
