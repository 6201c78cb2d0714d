"""
Schemas and cache helpers shared by the exam endpoints.
"""
