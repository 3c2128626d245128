"""
Document translation service: text extraction, language detection, text and
document translation, and translation quality hints, with resilient remote calls.
"""

__version__ = "1.0.0"
