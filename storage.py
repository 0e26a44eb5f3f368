import json
import logging

from flask_sqlalchemy import SQLAlchemy
from pydantic import ValidationError
from sqlalchemy import Column, String, Text

logger = logging.getLogger(__name__)

db = SQLAlchemy()

# ------------------------------------------------------------
# Key-value storage
#   string keys -> string values, same shape as browser localStorage.
#   Keys in use: "users", "inventory"
# ------------------------------------------------------------

class StorageEntry(db.Model):
    __tablename__ = "storage"

    key = Column(String(64), primary_key=True)
    value = Column(Text, nullable=False)


class DatabaseStorage:
    """Storage backed by the `storage` table. Needs an application context."""

    def get_item(self, key):
        entry = db.session.get(StorageEntry, key)
        return entry.value if entry else None

    def set_item(self, key, value):
        entry = db.session.get(StorageEntry, key)
        if entry:
            entry.value = value
        else:
            db.session.add(StorageEntry(key=key, value=value))
        db.session.commit()


class MemoryStorage:
    """Dict backed storage, nothing survives the process."""

    def __init__(self, items=None):
        self.items = dict(items or {})

    def get_item(self, key):
        return self.items.get(key)

    def set_item(self, key, value):
        self.items[key] = value


# ------------------------------------------------------------
# Collections
#   each collection is stored whole as a JSON array under its key
# ------------------------------------------------------------

def load_records(storage, key, model):
    """Read the collection under `key`, or [] if it is absent or malformed."""
    raw = storage.get_item(key)
    if raw is None:
        return []
    try:
        data = json.loads(raw)
        if not isinstance(data, list):
            raise ValueError(f"expected a JSON array, got {type(data).__name__}")
        return [model.model_validate(item) for item in data]
    except (ValueError, ValidationError) as e:
        # json.JSONDecodeError is a ValueError too
        logger.warning("Ignoring unreadable %r collection in storage: %s", key, e)
        return []


def save_records(storage, key, records):
    storage.set_item(key, json.dumps([record.model_dump() for record in records]))
