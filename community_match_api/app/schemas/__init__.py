"""
Pydantic schema definitions for API payloads.

Request and response bodies are kept separate from the SQL rows the
services read and write.  Fields that clients send in camelCase
(``servicesOffered``, ``toUserId``, ``resetCode``...) are declared
with aliases so Python code uses snake_case throughout.
"""
