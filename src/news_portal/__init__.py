"""Vietnamese news portal: article search and read API over MongoDB"""

__version__ = "0.1.0"
