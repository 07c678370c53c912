"""
db/ - Database Layer
====================
Handles PostgreSQL connections, the transaction scope, schema initialization
and the Open Opus data import.
This layer is the lowest in the architecture and has no dependencies on other layers.
"""
