"""Utilities for sklcmeans."""

from ._points import match_centers, to_pixel

__all__ = [
	"match_centers",
	"to_pixel",
]
