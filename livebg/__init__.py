"""Animated wallpaper effects: colour cycling images, starfields, ripples, distortion and waves."""

__version__ = "0.1.0"