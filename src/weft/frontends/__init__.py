"""Frontends - user interfaces over weft.core."""
