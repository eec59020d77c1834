"""
db/ - Database Layer
====================
Connection pools for PostgreSQL and MySQL, per-backend SQL dialects, and
the schema auto-migration that creates entity tables.
This layer depends only on models/ and utils/.
"""
