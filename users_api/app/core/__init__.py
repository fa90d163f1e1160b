"""Configuration, logging, database pool and error handling."""
