"""Inventory, order and payment building blocks for a rocket parts factory."""

__version__ = "0.1.0"