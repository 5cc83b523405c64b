from typing import Any, Optional, Dict


class BaseError(Exception):
    """Base exception class for the application"""

    def __init__(
        self,
        message: str = "An error occurred",
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_payload(self) -> Dict[str, Any]:
        """Response envelope shared by every JSON error the API returns"""
        return {"success": False, "message": self.message, "details": self.details}


class NotFoundError(BaseError):
    """Raised when an entity cannot be found by id or by another key"""

    def __init__(self, entity: str, id: Any, *, key: str = "id"):
        super().__init__(
            message=f"{entity} with {key} {id} not found",
            status_code=404,
            details={"entity": entity, key: id}
        )


class ValidationError(BaseError):
    """Input rejected before anything is written"""

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message=message, status_code=400, details=details)


class AuthenticationError(BaseError):
    """Missing or invalid credentials"""

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message=message, status_code=401)


class AuthorizationError(BaseError):
    """Authenticated, but the role does not allow the action"""

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message=message, status_code=403)


class BusinessLogicError(BaseError):
    """Exception raised for business rule violations"""

    def __init__(self, message: str, rule: Optional[str] = None):
        details = {"rule": rule} if rule else {}
        super().__init__(message=message, status_code=422, details=details)


class ExternalServiceError(BaseError):
    """Exception raised when an upstream service fails"""

    def __init__(self, service: str, message: str):
        super().__init__(
            message=f"External service error: {message}",
            status_code=503,
            details={"service": service}
        )


class PaymentGatewayError(ExternalServiceError):
    """Payment session could not be opened or a payment could not be validated"""

    def __init__(self, message: str, transaction_id: Optional[str] = None):
        super().__init__("sslcommerz", message)
        if transaction_id:
            self.details["transaction_id"] = transaction_id
