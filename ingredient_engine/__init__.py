"""Ingredient and quantity extraction from OCR recipe text."""
