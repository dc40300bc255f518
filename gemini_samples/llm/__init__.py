"""Gemini request modes and the HTTP client they run on."""
