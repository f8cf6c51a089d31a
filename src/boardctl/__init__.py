"""boardctl — workflow board engine and terminal host."""

__version__ = "0.1.0"
