"""Cycle-level model of the memory controller, ports and spike pooling of an SNN accelerator."""

__version__ = "0.1.0"
__all__ = ["types", "tile", "stats", "packets", "pooling", "ports", "sdmemory"]