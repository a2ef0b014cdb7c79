"""Block-breaking arcade game with stage files, a stage editor and an 8x12 bitmap font."""

__version__ = "0.1.0"
__all__ = ["__version__"]