"""SVG viewer helpers: text overlays, SVG loading, documents, system menus and timers."""

__version__ = "0.1.0"
__all__ = ["__version__"]