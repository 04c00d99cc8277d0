"""Value objects and records used across the memoization core."""
