"""Persistence layer for studynext."""
