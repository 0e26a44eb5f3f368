import logging
import threading

from pydantic import ValidationError as PydanticValidationError

from errors import DuplicateUsername, InvalidCredentials, ValidationError
from models import Credentials, User
from storage import load_records, save_records

logger = logging.getLogger(__name__)

USERS_KEY = "users"


class AccountDirectory:
    """Registered users, persisted whole under the "users" key after every change."""

    def __init__(self, storage):
        self._storage = storage
        self._lock = threading.Lock()
        self._users = load_records(storage, USERS_KEY, User)
        logger.info("Loaded %d registered users", len(self._users))

    def __len__(self):
        return len(self._users)

    def users(self):
        return list(self._users)

    def find(self, username):
        return next((u for u in self._users if u.username == username), None)

    def register(self, username, password):
        credentials = _parse_credentials(username, password)
        with self._lock:
            if self.find(credentials.username):
                raise DuplicateUsername()
            user = User.create(credentials.username, credentials.password)
            self._users.append(user)
            save_records(self._storage, USERS_KEY, self._users)
        logger.info("Registered user %s", user.username)
        return user

    def login(self, username, password):
        # unknown user and wrong password raise the same error
        try:
            credentials = _parse_credentials(username, password)
        except ValidationError:
            raise InvalidCredentials()
        user = self.find(credentials.username)
        if not user or not user.check_password(credentials.password):
            raise InvalidCredentials()
        logger.info("User %s logged in", user.username)
        return user


def _parse_credentials(username, password):
    try:
        return Credentials(username=username, password=password)
    except PydanticValidationError:
        raise ValidationError("Username and password are required.")
