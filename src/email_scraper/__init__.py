"""
Email scraper: polite contact-data crawler with batch orchestration and CSV export.
"""

__version__ = "0.1.0"
