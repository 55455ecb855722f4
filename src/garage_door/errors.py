"""Exceptions raised by the door geometry engine."""


class DoorGeometryError(Exception):
    """Base error for door geometry construction."""


class DoorConfigError(DoorGeometryError, ValueError):
    """Door configuration is missing or has invalid numeric fields."""


class ProfileError(DoorGeometryError, ValueError):
    """A 2D profile rectangle or hole is degenerate or misplaced."""


class ExtrusionError(DoorGeometryError, ValueError):
    """Extrusion parameters cannot produce a valid solid."""
