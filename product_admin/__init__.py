"""
Product admin console client: variant matrix editing, color/size query-swap
resolution and CSV bulk import against the admin REST API.
"""

__version__ = "1.0.0"
