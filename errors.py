# ------------------------------------------------------------
# Error taxonomy
# ------------------------------------------------------------

class InventoryError(Exception):
    """Base error, turned into a JSON {"error": message} response by app.py."""

    status_code = 400
    message = "Request could not be completed"

    def __init__(self, message=None):
        super().__init__(message or self.message)
        self.message = message or self.message

    def to_dict(self):
        return {"error": self.message}


class DuplicateUsername(InventoryError):
    status_code = 409
    message = "Username already exists."


class InvalidCredentials(InventoryError):
    # covers both unknown user and wrong password
    status_code = 401
    message = "Invalid credentials"


class ValidationError(InventoryError):
    status_code = 400
    message = "Please provide valid input for all fields."

    def __init__(self, message=None, form=None):
        super().__init__(message)
        self.form = form or {}

    def to_dict(self):
        data = super().to_dict()
        if self.form:
            data["form"] = self.form  # so the client can re-display what was entered
        return data


class RemovalPending(InventoryError):
    status_code = 409
    message = "A product removal is awaiting confirmation."


class NoPendingRemoval(InventoryError):
    status_code = 409
    message = "No product removal is awaiting confirmation."


class ProductNotFound(InventoryError):
    status_code = 404
    message = "Product not found"
