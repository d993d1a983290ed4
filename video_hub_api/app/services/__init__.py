"""
Service layer abstraction.

Each service encapsulates business logic for a domain and talks to
the database through ``core.db``.  API handlers only translate HTTP
input into service calls; errors raised here are ``core.errors``
exceptions that the application turns into JSON error responses.
"""
