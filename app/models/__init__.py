# app/models/__init__.py

from .users import (
    User,
    Influencer,
    Admin
)
