"""Tools for lrzip archives: headers, inspection, x86/IA-64 and delta filters, and helpers."""

__version__ = "0.1.0"

__all__ = ["delta", "environment", "info", "magic", "outname", "queue", "x86"]