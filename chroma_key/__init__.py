"""
Histogram chroma key: find the dominant foreground color and replace it
with (tiled) background content within an adjustable tolerance.
"""

__version__ = "1.0.0"
