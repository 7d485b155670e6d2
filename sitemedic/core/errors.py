"""Typed marketplace errors and their HTTP status codes"""


class MarketplaceError(Exception):
    """Base for business-rule failures raised by the calculators."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AttributionIntegrityError(MarketplaceError):
    """Provenance and fee policy disagree. A defect, never a valid transition."""

    status_code = 400


class PassOnPermissionError(MarketplaceError):
    status_code = 403


class PassOnStateError(MarketplaceError):
    status_code = 409
