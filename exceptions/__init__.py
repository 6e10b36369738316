from fastapi import HTTPException, status

class CustomHTTPException(HTTPException):
    def __init__(self, status_code: int, detail: str):
        super().__init__(status_code=status_code, detail=detail)

class InvalidStatusTransitionException(CustomHTTPException):
    def __init__(self, detail: str = "Invalid status transition"):
        super().__init__(status.HTTP_400_BAD_REQUEST, detail)

class InvalidAmountException(CustomHTTPException):
    def __init__(self, detail: str = "Amount must be greater than zero"):
        super().__init__(status.HTTP_400_BAD_REQUEST, detail)

class InvalidSplitException(CustomHTTPException):
    def __init__(self, detail: str = "Invalid profit split"):
        super().__init__(status.HTTP_400_BAD_REQUEST, detail)

class DoubleSaleException(InvalidStatusTransitionException):
    def __init__(self, detail: str = "Item already has a sale"):
        super().__init__(detail)

class InsufficientPermissionsException(CustomHTTPException):
    def __init__(self, detail: str = "Insufficient permissions"):
        super().__init__(status.HTTP_403_FORBIDDEN, detail)

class ResourceNotFoundException(CustomHTTPException):
    def __init__(self, resource: str = "Resource"):
        super().__init__(status.HTTP_404_NOT_FOUND, f"{resource} not found")

class DuplicateResourceException(CustomHTTPException):
    def __init__(self, detail: str = "Resource already exists"):
        super().__init__(status.HTTP_409_CONFLICT, detail)

class AuthenticationFailedException(CustomHTTPException):
    def __init__(self, detail: str = "Could not validate credentials"):
        super().__init__(status.HTTP_401_UNAUTHORIZED, detail)
        self.headers = {"WWW-Authenticate": "Bearer"}
