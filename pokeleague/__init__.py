"""PokeLeague - a layered Pokemon league REST API."""

__version__ = "1.0.0"
