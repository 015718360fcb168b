"""Line-oriented stock trading servers, clients and their building blocks."""

__version__ = "0.1.0"