"""Personal quote collection API with device and cloud storage."""

__version__ = "0.1.0"
