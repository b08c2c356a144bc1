"""Load world cities into PostGIS and benchmark nearest-neighbour lookups."""

__version__ = "0.1.0"
