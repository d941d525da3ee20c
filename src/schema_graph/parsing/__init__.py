"""Parsing module for the fragment and config DSLs."""

from schema_graph.parsing.config_parser import ConfigParser
from schema_graph.parsing.fragment_parser import FragmentParser

__all__ = [
    "ConfigParser",
    "FragmentParser",
]
