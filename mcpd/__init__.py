"""Line-based TCP server that keeps per-client context data in memory."""

__version__ = "0.1.0"