"""Authentication for studynext."""
