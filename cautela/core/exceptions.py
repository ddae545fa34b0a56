
class CautelaAPIError(Exception):
    status_code = 500
    default_message = "Internal error"

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = str(self)

class ValidationError(CautelaAPIError):
    status_code = 400
    default_message = "Invalid data"

class UnauthorizedError(CautelaAPIError):
    status_code = 401
    default_message = "Unauthorized"

class NotFoundError(CautelaAPIError):
    status_code = 404
    default_message = "Not found"

class EquipmentNotFoundError(NotFoundError):
    default_message = "Equipment not found"

class CategoryNotFoundError(NotFoundError):
    default_message = "Category not found"

class CustomerNotFoundError(NotFoundError):
    default_message = "Customer not found"

class LoanNotFoundError(NotFoundError):
    default_message = "Loan not found"

class UserNotFoundError(NotFoundError):
    default_message = "User not found"

class AlterationNotFoundError(NotFoundError):
    default_message = "Alteration not found"

class TemplateNotFoundError(NotFoundError):
    default_message = "Template not found"

class ConflictError(CautelaAPIError):
    status_code = 400
    default_message = "Conflict"

class DuplicateError(ConflictError):
    default_message = "Record already exists"

class InsufficientStockError(ConflictError):
    default_message = "Insufficient stock"

class SerialUnavailableError(ConflictError):
    default_message = "Requested serial numbers unavailable"

class LoanStatusError(ConflictError):
    status_code = 409
    default_message = "Invalid loan status transition"

class SelfDeleteError(ConflictError):
    default_message = "Cannot delete your own user"

class DatabaseInsertError(CautelaAPIError):
    default_message = "Database write failed"

class RenderError(CautelaAPIError):
    default_message = "Failed to generate document"
