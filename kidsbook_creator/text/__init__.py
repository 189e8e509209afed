"""Text helpers shared by the ingestion pipeline."""

from .clean import CleaningOptions, TextCleaner, clean_extracted_text

__all__ = ["CleaningOptions", "TextCleaner", "clean_extracted_text"]
