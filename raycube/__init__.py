"""Ray-casting maze explorer that loads .cub scene files and renders them with pygame."""

__version__ = "0.1.0"
__all__ = ["__version__"]