# Schemas package init
"""
Foodies Backend — API Schemas
===============================

Pydantic models for request validation (consumed by foodies.validation) and
for every response body. ORM rows never leave the API directly.
"""
