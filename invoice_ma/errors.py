"""Error taxonomy shared by the services and the HTTP layer.

Every error here is caller-correctable: the HTTP layer renders it as a 4xx
JSON body and nothing is retried. A failed operation leaves persisted state
unchanged because services roll the session back before raising.
"""


class InvoiceMaError(Exception):
    status_code = 400
    default_message = "Request failed."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(InvoiceMaError):
    status_code = 422
    default_message = "Validation failed."


class InsufficientCredits(InvoiceMaError):
    status_code = 403
    default_message = "Insufficient credits. Please purchase more credits."


class DuplicateInvoiceNumber(InvoiceMaError):
    status_code = 409
    default_message = "Invoice number already exists."


class NotFound(InvoiceMaError):
    status_code = 404
    default_message = "Not found."


class Forbidden(InvoiceMaError):
    status_code = 403
    default_message = "Forbidden."


class EditConflict(InvoiceMaError):
    status_code = 409
    default_message = "Invoice was modified by another request. Please retry."
