"""
Component Library Domain

Turns descriptor archives dropped by the component search engine into
CAD libraries on disk:
- Descriptor archives (zip with an .epw file) → remote part id
- Remote package → raw zip, EAGLE, EasyEDA or KiCad layout
- Saved libraries → refresh hook
"""

__all__ = ["extractors", "watchers"]
