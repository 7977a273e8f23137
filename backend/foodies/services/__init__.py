# Services package init
"""
Foodies Backend — Services Layer
==================================

What:  Business logic between routes (HTTP) and the database.
How:   Each service is a stateless class with a module-level singleton;
       methods take the request's AsyncSession as their first argument and
       raise foodies.exceptions errors instead of returning HTTP responses.

Service Inventory:
    - AuthService:     bearer token decoding and user lookup
    - RecipeService:   recipe queries, creation and owner-only deletion
    - FavoriteService: add / remove / paginated list of favorites
    - CategoryService: category list and creation
    - UserService:     current profile, follow / unfollow, follow lists
    - FileService:     recipe image validation, storage and cleanup
"""
