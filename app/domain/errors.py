"""
Domain Errors

Every rejection raised by the compliance engine derives from ValueError so
callers that only distinguish "rejected input" from "system failure" keep
working. The subclasses let the HTTP layer pick a status code.
"""


class ComplianceEngineError(ValueError):
    """Base class for all expected engine rejections"""


class InvalidInputError(ComplianceEngineError):
    """Input failed validation (bad ship id, year, amount, members...)"""


class StateConflictError(ComplianceEngineError):
    """Input is valid but conflicts with current state"""


class InsufficientBalanceError(StateConflictError):
    """Borrow request exceeds the ship's banked balance"""

    def __init__(self, ship_id: str, available, requested):
        self.ship_id = ship_id
        self.available = available
        self.requested = requested
        super().__init__(
            "Insufficient banked balance. "
            f"Available: {available / 1_000_000:.2f} tonnes CO2e, "
            f"Requested: {requested / 1_000_000:.2f} tonnes CO2e"
        )


class PoolMembershipError(StateConflictError):
    """Membership change would break pool invariants"""


class NotFoundError(ComplianceEngineError):
    """Referenced route, pool or member does not exist"""
