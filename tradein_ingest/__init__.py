"""Trade-in spreadsheet ingestion and price trend reporting."""

__version__ = "0.1.0"
