"""smart-layout: deterministic chart layout geometry."""

__version__ = "0.1.0"
