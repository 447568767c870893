"""Chat users and the persistent user directory."""

from typing import Protocol

from pydantic import BaseModel, ConfigDict, model_validator

from ..store.keyvalue import KeyValueStore, Namespace


class User(BaseModel):
    """A chat user, identified by an opaque ID string."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    mention_name: str = ""

    @model_validator(mode="after")
    def fill_names(self) -> "User":
        # Frozen model: defaults are derived through the instance dict.
        if not self.name:
            self.__dict__["name"] = self.id
        if not self.mention_name:
            self.__dict__["mention_name"] = self.name
        return self


class UserLookup(Protocol):
    """Anything that can resolve a user ID to a User."""

    def find_by_id(self, user_id: str) -> User | None: ...


class UserDirectory:
    """Persists users in the ``users`` namespace of a store.

    Layout:
        users:id:<id>                  hash with name and mention_name
        users:mention_name:<mention>   the user's id
    """

    def __init__(self, redis: KeyValueStore) -> None:
        self.redis = Namespace("users", redis)

    def create(self, user_id: str, name: str = "", mention_name: str = "") -> User:
        """Create or update a user record and return the stored user."""
        user = User(id=str(user_id), name=name, mention_name=mention_name)
        self.redis.hset(f"id:{user.id}", {"name": user.name, "mention_name": user.mention_name})
        self.redis.set(f"mention_name:{user.mention_name}", user.id)
        return user

    def find_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Returns None when no record exists."""
        data = self.redis.hgetall(f"id:{user_id}")
        if not data:
            return None
        return User(id=str(user_id), name=data.get("name", ""), mention_name=data.get("mention_name", ""))

    def find_by_mention_name(self, mention_name: str) -> User | None:
        """Find a user by mention name. Returns None when unknown."""
        user_id = self.redis.get(f"mention_name:{mention_name}")
        if user_id is None:
            return None
        return self.find_by_id(user_id)
