from datetime import datetime
from typing import Optional

from peewee import (
    AutoField,
    BooleanField,
    CharField,
    DateTimeField,
    TextField,
)
from db.base import BaseModel


class User(BaseModel):
    id = AutoField(primary_key=True)
    username = CharField(max_length=50, unique=True)
    email = CharField(max_length=255, unique=True)
    password_hash = CharField(max_length=255)
    player_id = CharField(max_length=100, null=True)  # linked BF6 account
    player_name = CharField(max_length=100, null=True)
    avatar_url = CharField(max_length=500, null=True)
    bio = TextField(null=True)
    is_verified = BooleanField(default=False)
    created_at = DateTimeField(default=datetime.utcnow)
    updated_at = DateTimeField(default=datetime.utcnow)

    class Meta:
        table_name = "users"

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}', email='{self.email}')>"

    def save(self, *args, **kwargs):
        """Override save to auto-update updated_at timestamp."""
        self.updated_at = datetime.utcnow()
        return super().save(*args, **kwargs)

    @classmethod
    def find_by_login(cls, identifier: str) -> Optional["User"]:
        """Look a user up by username or email (login accepts either)."""
        return (
            cls.select()
            .where((cls.username == identifier) | (cls.email == identifier))
            .first()
        )

    @classmethod
    def is_taken(cls, username: str, email: str) -> bool:
        return (
            cls.select()
            .where((cls.username == username) | (cls.email == email))
            .exists()
        )
