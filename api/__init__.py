"""HTTP surface: one Flask blueprint per endpoint family."""
