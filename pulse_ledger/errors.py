class LedgerError(Exception):
    pass


class UnauthorizedError(LedgerError):
    pass


class InvalidArgumentError(LedgerError):
    pass


class ConflictError(LedgerError):
    pass


class NotFoundError(LedgerError):
    pass


class TransferFailedError(LedgerError):
    pass
