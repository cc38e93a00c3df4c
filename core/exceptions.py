"""
Domain exceptions raised by validators and services.
Services raise these; api.exceptions turns them into HTTP responses.
"""


class BaseApplicationException(Exception):
    """Root of the exceptions that api.exceptions turns into JSON errors"""
    default_message = "Request could not be completed"
    default_code = "APPLICATION_ERROR"

    def __init__(self, message=None, code=None, details=None):
        self.message = message or self.default_message
        self.code = code or self.default_code
        self.details = details or {}
        super().__init__(self.message)

    def as_dict(self):
        """Response body: {detail, code, details}"""
        return {'detail': self.message, 'code': self.code, 'details': self.details}


class ValidationError(BaseApplicationException):
    """Raised when input breaks a field rule (price, phone number, member count...)"""
    default_message = "Invalid input"
    default_code = "VALIDATION_ERROR"


class NotFoundError(BaseApplicationException):
    """Raised when an apartment, tenant, rental or membership does not exist"""
    default_message = "Record not found"
    default_code = "NOT_FOUND"

    def __init__(self, resource_type=None, resource_id=None, **kwargs):
        self.resource_type = resource_type
        self.resource_id = resource_id
        if 'message' not in kwargs and resource_type:
            kwargs['message'] = f"{resource_type} {resource_id} not found"
        super().__init__(**kwargs)


class BusinessLogicError(BaseApplicationException):
    """Raised when the rental's current state does not allow the operation"""
    default_message = "Operation not allowed for this rental"
    default_code = "BUSINESS_RULE_VIOLATION"


class ConflictError(BusinessLogicError):
    """Raised when the change collides with existing data (second active rental, double payment)"""
    default_message = "Resource is in a conflicting state"
    default_code = "CONFLICT"
