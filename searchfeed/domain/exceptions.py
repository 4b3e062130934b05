"""Domain exceptions.

All domain-level errors raised while exporting the catalog or talking
to the external search service. Product validation failures use a single
tagged error type whose kind decides the operator-facing message.
"""

from enum import Enum
from typing import Any


class DomainError(Exception):
    """Base class for all domain exceptions.

    All domain errors should inherit from this class to allow
    catching domain-specific errors at the application layer.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# State Machine Errors
# ============================================================================


class InvalidStateTransitionError(DomainError):
    """Raised when an invalid state transition is attempted."""

    def __init__(
        self,
        entity_type: str,
        entity_id: str,
        current_state: str,
        target_state: str,
        allowed_transitions: list[str] | None = None,
    ) -> None:
        """Initialize invalid state transition error.

        Args:
            entity_type: Type of entity (e.g., "Export").
            entity_id: ID of the entity.
            current_state: Current state of the entity.
            target_state: Attempted target state.
            allowed_transitions: List of allowed target states from current state.
        """
        allowed = allowed_transitions or []
        message = (
            f"Cannot transition {entity_type}({entity_id}) "
            f"from '{current_state}' to '{target_state}'. "
            f"Allowed transitions: {allowed}"
        )
        super().__init__(
            message,
            details={
                "entity_type": entity_type,
                "entity_id": entity_id,
                "current_state": current_state,
                "target_state": target_state,
                "allowed_transitions": allowed,
            },
        )


# ============================================================================
# Export Request Errors
# ============================================================================


class InvalidExportRequestError(DomainError):
    """Raised when export parameters are malformed.

    Rejected before any catalog access takes place.
    """

    def __init__(self, violations: list[str]) -> None:
        """Initialize invalid export request error.

        Args:
            violations: One message per violated constraint.
        """
        super().__init__(
            "; ".join(violations),
            details={"violations": violations},
        )
        self.violations = violations


class UnknownShopkeyError(DomainError):
    """Raised when a shopkey is not bound to any sales channel."""

    def __init__(self, shopkey: str) -> None:
        """Initialize unknown shopkey error.

        Args:
            shopkey: The shopkey that could not be resolved.
        """
        super().__init__(
            f'Given shopkey "{shopkey}" is not assigned to any shop',
            details={"shopkey": shopkey},
        )
        self.shopkey = shopkey


class StorefrontContextError(DomainError):
    """Raised when a storefront context cannot be created for a channel."""

    def __init__(self, sales_channel_id: str) -> None:
        """Initialize storefront context error.

        Args:
            sales_channel_id: The sales channel that does not exist.
        """
        super().__init__(
            f"Sales channel {sales_channel_id} does not exist",
            details={"sales_channel_id": sales_channel_id},
        )


# ============================================================================
# Product Export Errors
# ============================================================================


class ExportErrorKind(str, Enum):
    """Reasons a product can be missing from an export.

    The first five kinds are per-item validation failures, the last two
    describe a targeted product id that produced no rows.
    """

    MISSING_ATTRIBUTES = "missing-attributes"
    MISSING_NAME = "missing-name"
    MISSING_PRICES = "missing-prices"
    MISSING_CATEGORIES = "missing-categories"
    MISSING_PROPERTY = "missing-property"
    NO_MATCH = "no-match"
    NOT_SEARCHABLE = "not-searchable"

    def is_item_invalid(self) -> bool:
        """Check if this kind is a per-item validation failure.

        Returns:
            True for the item-invalid kinds.
        """
        return self not in {ExportErrorKind.NO_MATCH, ExportErrorKind.NOT_SEARCHABLE}

    def describe(self, product_id: str | None = None) -> str:
        """Build the operator-facing message for this kind.

        Args:
            product_id: Affected product, required for item-invalid kinds.

        Returns:
            Human-readable message.
        """
        return _EXPORT_ERROR_MESSAGES[self].format(product_id=product_id)


_EXPORT_ERROR_MESSAGES: dict[ExportErrorKind, str] = {
    ExportErrorKind.MISSING_PROPERTY: (
        "Product with id {product_id} was not exported because the property does not exist"
    ),
    ExportErrorKind.MISSING_ATTRIBUTES: (
        "Product with id {product_id} was not exported because it has no attributes"
    ),
    ExportErrorKind.MISSING_NAME: (
        "Product with id {product_id} was not exported because it has no name set"
    ),
    ExportErrorKind.MISSING_PRICES: (
        "Product with id {product_id} was not exported because it has no price associated to it"
    ),
    ExportErrorKind.MISSING_CATEGORIES: (
        "Product with id {product_id} was not exported because it has no categories assigned"
    ),
    ExportErrorKind.NO_MATCH: "No product could be found for the given id.",
    ExportErrorKind.NOT_SEARCHABLE: (
        "The product could not be exported, since it is not available for search."
    ),
}


class ProductInvalidError(DomainError):
    """Raised when a product lacks data required for the export.

    Always scoped to a single product and never fatal to the batch.
    """

    def __init__(
        self,
        kind: ExportErrorKind,
        product_id: str,
        field: str | None = None,
    ) -> None:
        """Initialize product invalid error.

        Args:
            kind: Which validation failed.
            product_id: ID of the rejected product.
            field: Name of the absent field, for missing-property failures.
        """
        super().__init__(
            kind.describe(product_id),
            details={"kind": kind.value, "product_id": product_id, "field": field},
        )
        self.kind = kind
        self.product_id = product_id
        self.field = field


# ============================================================================
# External Service Errors
# ============================================================================


class SearchServiceError(DomainError):
    """Raised when the external search service returns an unusable response."""

    def __init__(
        self, message: str, status_code: int | None = None
    ) -> None:
        """Initialize search service error.

        Args:
            message: Error description.
            status_code: HTTP status code, if a response was received.
        """
        super().__init__(message, details={"status_code": status_code})
        self.status_code = status_code


class SearchServiceUnavailableError(SearchServiceError):
    """Raised when the external search service is not alive or unreachable."""

    pass


class ServiceConfigError(DomainError):
    """Raised when the remote per-shop service configuration cannot be read."""

    def __init__(self, shopkey: str, message: str) -> None:
        """Initialize service config error.

        Args:
            shopkey: Shop whose configuration was requested.
            message: Error description.
        """
        super().__init__(message, details={"shopkey": shopkey})
        self.shopkey = shopkey
