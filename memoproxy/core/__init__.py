"""Core Application Layer: the memoization pipeline.

Key derivation and record encoding live in ``keys``; the wrapper, the
per-method caching functions and the ``memoized`` decorator in ``memoizer``.
"""
