"""Teaching storage layer: paged files, a clock buffer pool, catalog record layouts and join hashing."""

__version__ = "0.1.0"