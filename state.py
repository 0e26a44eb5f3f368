from accounts import AccountDirectory
from inventory import InventoryStore


class AppState:
    """Everything the application owns, loaded once from storage at startup."""

    def __init__(self, accounts, inventory):
        self.accounts = accounts
        self.inventory = inventory

    @classmethod
    def load(cls, storage):
        return cls(AccountDirectory(storage), InventoryStore(storage))
