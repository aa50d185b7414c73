"""Automatic skin smoothing and blemish removal on top of OpenCV."""

__version__ = "1.0.0"
