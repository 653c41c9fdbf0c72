"""Shared configuration, CORS, errors and logging."""
