"""Game logic, collision, model animation and asset parsing for a small 3D action game."""

__version__ = "0.1.0"