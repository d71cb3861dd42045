"""
Service layer.

Each service encapsulates the business logic of one concern and works
on the SQLite connection handed to it by the endpoint, so handlers
stay thin and services can be exercised without HTTP.
"""
