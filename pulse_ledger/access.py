from .errors import InvalidArgumentError, UnauthorizedError
from .models import OwnershipTransferred


def require_identity(value, role: str) -> str:
    if not isinstance(value, str) or not value:
        raise InvalidArgumentError(f"{role} must be a non-empty string identity, got {value!r}")
    return value


class AccessControl:
    def __init__(self, owner: str):
        self._owner = require_identity(owner, "Initial owner")

    @property
    def owner(self) -> str:
        return self._owner

    def require_owner(self, caller: str) -> None:
        if caller != self._owner:
            raise UnauthorizedError(f"Caller {caller!r} is not the ledger owner")

    def transfer_ownership(self, caller: str, new_owner: str) -> OwnershipTransferred:
        self.require_owner(caller)
        require_identity(new_owner, "New owner")

        previous_owner = self._owner
        self._owner = new_owner
        return OwnershipTransferred(previous_owner=previous_owner, new_owner=new_owner)
