from .mock_carrier import MockCarrier, MockRegistry, make_rate

__all__ = ["MockCarrier", "MockRegistry", "make_rate"]
