"""Slicers that turn model files into printable project files."""

from .orca import OrcaSlicer, find_orca_slicer

__all__ = ["OrcaSlicer", "find_orca_slicer"]
