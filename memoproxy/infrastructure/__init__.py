"""Infrastructure Layer: Contains concrete implementations and adapters.

Stores backing the memoization core, configuration loading, logging setup
and the console output used by the maintenance CLI.
"""
