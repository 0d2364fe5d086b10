"""
Vagabond - A very simple Cassandra migration tool.

Migrations are kept as an ordered manifest plus one directory of up/down CQL
scripts per migration; the name of the current migration is stored in the
target keyspace itself.
"""

__version__ = "0.2.0"

__all__ = ['__version__']
