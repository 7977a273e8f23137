# Routes package init
"""
Foodies Backend — API Routes Package
======================================

Route Inventory:
    - recipes.py:     /api/recipes           (list, popular, own, by id,
                                              create, delete)
                      /api/recipes/favorites (add, remove, list)
    - categories.py:  /api/categories        (list, create)
    - users.py:       /api/users/current, /api/users/{id}/follow,
                      /api/users/{id}/followers, /api/users/{id}/following
    - files.py:       /api/files/{path}      (stored recipe images)
    - health.py:      /health

Design Principle:
    Routes stay thin: pull validated input from dependencies, call one
    service method, return its result. Ownership checks, conflicts and
    pagination live in the services.
"""
