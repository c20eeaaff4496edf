"""
Error types shared by the service and persistence layers.

Two families exist: validation errors raised by the service when a request
breaks a rule, and store errors raised by the DAOs when the database rejects
or fails an operation. Controllers map each type to an HTTP status.
"""

INVALID_PRODUCT_ID_MESSAGE = "ID do produto inválido. Verifique se o ID está no formato correto."
INVALID_LIST_ID_MESSAGE = "ID da lista de compras inválido. Verifique se o ID está no formato correto."
LIST_NOT_FOUND_MESSAGE = "Lista de compras não encontrada."
PRODUCT_NOT_FOUND_MESSAGE = "Produto não encontrado."


class ProductValidationError(ValueError):
    """Request input or authorization rule was not satisfied."""


class PermissionDeniedError(ProductValidationError):
    pass


class ResourceNotFoundError(ProductValidationError):
    pass


class InvalidListIdentifierError(ProductValidationError):
    pass


class StoreError(Exception):
    """Base class for failures coming from the DataStore."""


class InvalidIdentifierError(StoreError):
    def __init__(self, field: str, value):
        self.field = field
        self.value = value
        super().__init__(f"Malformed identifier for {field}: {value!r}")


class RecordNotFoundError(StoreError):
    def __init__(self, model: str, id: str):
        self.model = model
        self.id = id
        super().__init__(f"{model} {id} not found")


class StoreUnavailableError(StoreError):
    pass
