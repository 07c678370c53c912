"""
validators/ - Request Validation Layer
=======================================
Checks request bodies, query strings and cookies before they reach a Service.
Every validator collects all field failures of one request and raises them
together as a single ValidationError.
"""
