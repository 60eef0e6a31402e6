"""Placement of installed trees into durable layer directories."""

from .placement import LayerPlacement

__all__ = ["LayerPlacement"]
