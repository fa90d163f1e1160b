"""
Service layer abstraction.

Each service encapsulates the SQL for a domain so that API handlers
only deal with schemas and HTTP concerns.
"""
