"""
Translate Gateway: HTTP front for an external translation service.
"""
__version__ = "1.0.0"
