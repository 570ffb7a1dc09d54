"""Worked example applications built on statetree."""
