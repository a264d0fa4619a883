class BaseServiceError(Exception):
    """Base exception for all service-related errors."""
    pass

class ShippingServiceError(BaseServiceError):
    """Base exception for shipping rate errors."""
    pass

class CarrierError(ShippingServiceError):
    """Raised when a carrier adapter fails to return rates.

    ``recoverable`` marks transient transport failures (timeouts, refused
    connections, DNS) that the orchestrator may retry.
    """

    def __init__(self, carrier: str, message: str, recoverable: bool = False):
        super().__init__(message)
        self.carrier = carrier
        self.message = message
        self.recoverable = recoverable

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"CarrierError(carrier={self.carrier!r}, message={self.message!r}, "
            f"recoverable={self.recoverable})"
        )

class CarrierNotSupportedError(ShippingServiceError):
    """Raised when no adapter exists for a carrier name."""
    pass

class CarrierNotConfiguredError(ShippingServiceError):
    """Raised when an adapter is requested for a carrier without credentials."""
    pass

class NoCarriersConfiguredError(ShippingServiceError):
    """Raised when a rate request resolves to no dispatchable carriers."""
    pass
