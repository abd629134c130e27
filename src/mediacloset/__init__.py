"""MediaCloset metadata resolver.

Resolves album metadata from barcodes or artist/album titles, and movie
metadata from titles, across several public catalogs.
"""

__version__ = "1.0.0"
