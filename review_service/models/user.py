"""
User model for authentication
"""

from pydantic import BaseModel


class User(BaseModel):
    """Caller identity taken from the JWT payload"""

    id: str
