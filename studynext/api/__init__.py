"""HTTP API for studynext."""
