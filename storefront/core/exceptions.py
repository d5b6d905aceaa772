# storefront/core/exceptions.py
"""
Application error taxonomy.

Services raise these instead of HTTPException so they can be used (and
tested) outside a request. `storefront.main` maps every StorefrontError
to a JSON response with the error's status code.
"""
import uuid

from fastapi import status


class StorefrontError(Exception):
    """Base class for all storefront errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "STOREFRONT_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"detail": self.message, "code": self.code}


class ValidationError(StorefrontError):
    """Input rejected before any write was attempted."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "VALIDATION_ERROR"


class EmptyCartError(ValidationError):
    code = "EMPTY_CART"

    def __init__(self, message: str = "Cart is empty"):
        super().__init__(message)


class NotFoundError(StorefrontError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"


class FetchError(StorefrontError):
    """A read against the data store failed."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "FETCH_ERROR"


class OrderPlacementError(StorefrontError):
    """
    A checkout write failed after validation passed.

    stage:
      - "address" | "order" | "lines"

    compensated:
      - True when every row written before the failure was removed again
        (or nothing had been written yet).

    order_id / address_id:
      - only set for rows that are still persisted after compensation
    """

    status_code = status.HTTP_502_BAD_GATEWAY
    code = "ORDER_PLACEMENT_FAILED"

    def __init__(
        self,
        stage: str,
        message: str | None = None,
        compensated: bool = True,
        order_id: uuid.UUID | None = None,
        address_id: uuid.UUID | None = None,
    ):
        self.stage = stage
        self.compensated = compensated
        self.order_id = order_id
        self.address_id = address_id
        super().__init__(message or f"Failed to place order at stage '{stage}'")

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["stage"] = self.stage
        data["compensated"] = self.compensated
        if self.order_id is not None:
            data["order_id"] = str(self.order_id)
        if self.address_id is not None:
            data["address_id"] = str(self.address_id)
        return data


class ServiceUnavailable(StorefrontError):
    """The suggestion collaborator did not answer with a usable payload."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "SERVICE_UNAVAILABLE"
