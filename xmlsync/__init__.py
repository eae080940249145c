"""
Estate Index XML sync - keeps a directory of listing pages in step with an XML feed.
"""

__version__ = "1.0.0"
