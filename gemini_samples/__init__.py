"""Gemini API sample programs: text, multimodal, chat and streaming generation."""

__version__ = "0.1.0"
