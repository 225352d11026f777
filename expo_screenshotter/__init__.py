"""Capture screenshots of Expo web apps at configured screen sizes."""

__version__ = "0.3.0"
