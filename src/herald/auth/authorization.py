"""Methods for querying and manipulating authorization groups.

Groups are sets of user IDs stored in the ``auth`` namespace of the
robot's store. The ``admins`` group is virtual: membership is read from
``config.robot.admins`` and never from storage.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict

from ..infrastructure.logging_config import get_logger
from ..models.config import RobotConfig
from ..models.user import User, UserDirectory, UserLookup
from ..store.keyvalue import KeyValueStore, Namespace

logger = get_logger(__name__)

ADMIN_GROUP = "admins"
AUTH_NAMESPACE = "auth"


class AuthorizationResult(BaseModel):
    """Result of a group mutation.

    Results have no truth value, so ``if result:`` raises instead of
    silently treating ``Unauthorized`` as success.
    """

    model_config = ConfigDict(frozen=True)

    def __bool__(self) -> bool:
        raise TypeError(
            f"{type(self).__name__} has no truth value; "
            "check for Unauthorized or read Changed.changed"
        )


class Unauthorized(AuthorizationResult):
    """The requesting user is not an administrator."""

    @property
    def authorized(self) -> bool:
        return False


class Changed(AuthorizationResult):
    """The mutation was allowed. ``changed`` is False if it was a no-op."""

    changed: bool

    @property
    def authorized(self) -> bool:
        return True


UNAUTHORIZED = Unauthorized()


def normalize_group(group: object) -> str:
    """Ensure that group names are stored consistently."""
    if isinstance(group, Enum):
        group = group.value
    return str(group).strip().lower()


class AuthorizationService:
    """Group membership management for a single robot.

    Example:
        auth = AuthorizationService(robot.config, redis=root_store)
        result = auth.add_user_to_group(requester, user, "Ops")
        if isinstance(result, Unauthorized):
            ...
        elif result.changed:
            ...
    """

    def __init__(
        self,
        config: RobotConfig,
        redis: KeyValueStore | None = None,
        users: UserLookup | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            config: The robot's configuration (source of the admin list).
            redis: Root store namespace. Defaults to the process root store.
            users: Collaborator used to resolve member IDs to users.
        """
        self.config = config
        self._root = redis
        self._users = users
        self._redis: Namespace | None = None

    @property
    def redis(self) -> Namespace:
        """A namespace for authorization data."""
        if self._redis is None:
            root = self._root
            if root is None:
                from ..legacy import get_facade

                root = get_facade().redis()
            self._redis = Namespace(AUTH_NAMESPACE, root)
        return self._redis

    @property
    def users(self) -> UserLookup:
        if self._users is None:
            self._users = UserDirectory(self.redis.store)
        return self._users

    def add_user_to_group(self, requesting_user: User, user: User, group: object) -> Unauthorized | Changed:
        """Add a user to an authorization group.

        Args:
            requesting_user: The user who sent the command.
            user: The user to add to the group.
            group: The name of the group.

        Returns:
            UNAUTHORIZED if the requesting user is not an admin, otherwise
            Changed(True) if the user was added or Changed(False) if they
            were already a member.
        """
        if not self.user_is_admin(requesting_user):
            logger.info(
                "group_change_denied",
                action="add",
                requesting_user=requesting_user.id,
                group=normalize_group(group),
            )
            return UNAUTHORIZED

        group = normalize_group(group)
        if group == ADMIN_GROUP:
            logger.warning("stored_admins_group_written", user=user.id)
        return Changed(changed=self.redis.sadd(group, user.id))

    def remove_user_from_group(
        self, requesting_user: User, user: User, group: object
    ) -> Unauthorized | Changed:
        """Remove a user from an authorization group.

        Returns:
            UNAUTHORIZED if the requesting user is not an admin, otherwise
            Changed(True) if the user was removed or Changed(False) if they
            were not a member.
        """
        if not self.user_is_admin(requesting_user):
            logger.info(
                "group_change_denied",
                action="remove",
                requesting_user=requesting_user.id,
                group=normalize_group(group),
            )
            return UNAUTHORIZED

        return Changed(changed=self.redis.srem(normalize_group(group), user.id))

    def user_in_group(self, user: User, group: object) -> bool:
        """Check if a user is in an authorization group."""
        group = normalize_group(group)
        if group == ADMIN_GROUP:
            return self.user_is_admin(user)
        return self.redis.sismember(group, user.id)

    def user_is_admin(self, user: User) -> bool:
        """Check if a user is listed in ``config.robot.admins``."""
        return user.id in (self.config.robot.admins or ())

    def groups(self) -> list[str]:
        """Return the names of all stored authorization groups."""
        return self.redis.keys("*")

    def groups_with_users(self) -> dict[str, list[User | None]]:
        """Return each stored group with its members resolved to users.

        Members the user lookup cannot resolve are returned as whatever the
        lookup gives back for them (None for the default directory).
        """
        return {
            group: [self.users.find_by_id(user_id) for user_id in sorted(self.redis.smembers(group))]
            for group in self.groups()
        }
