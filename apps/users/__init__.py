"""Users app package.

Defines the campus user model with its role and the typed caller
identity the booking engine receives. Use ``apps.users.models.CustomUser``
as the AUTH_USER_MODEL throughout the project.
"""
