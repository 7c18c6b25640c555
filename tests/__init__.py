"""Tests for PokeLeague."""
