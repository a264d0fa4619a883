"""
Fee Composition

Optional paid services (insurance, signature, fragile handling, Saturday
delivery) are layered onto a base rate one fee at a time. Every layer is an
immutable ``RateDecorator`` wrapping exactly one inner component, so the base
rate and each intermediate layer stay queryable after decoration.

Fee rules are applied by ``apply_fees`` in a fixed canonical order:

    insurance -> signature -> fragile handling -> Saturday delivery

Cost is additive, so the total does not depend on the order; the order only
fixes the sequence of the itemized fee list.
"""

import logging
from dataclasses import dataclass
from functools import reduce
from typing import List, Optional, Protocol, Tuple

from shipquote.core.enums import FeeType
from shipquote.schemas.rates import Fee, ShippingOptions, ShippingRate

logger = logging.getLogger(__name__)


class RateComponent(Protocol):
    def get_cost(self) -> float: ...

    def get_description(self) -> str: ...

    def get_fees(self) -> List[Fee]: ...


@dataclass(frozen=True)
class BaseRate:
    """Undecorated carrier price"""

    amount: float
    description: str

    def get_cost(self) -> float:
        return self.amount

    def get_description(self) -> str:
        return self.description

    def get_fees(self) -> List[Fee]:
        return []


@dataclass(frozen=True)
class RateDecorator:
    """Wraps one component and adds exactly one fee to it"""

    component: RateComponent
    fee: Fee

    def get_cost(self) -> float:
        return self.component.get_cost() + self.fee.amount

    def get_description(self) -> str:
        return self.component.get_description()

    def get_fees(self) -> List[Fee]:
        return [*self.component.get_fees(), self.fee]


class FeeRule:
    """A paid service that contributes one fee when the options ask for it"""

    fee_type: FeeType = FeeType.OTHER
    description: str = ""
    amount: float = 0.0

    def applies(self, options: ShippingOptions, declared_value: Optional[float] = None) -> bool:
        raise NotImplementedError

    def fee(self, declared_value: Optional[float] = None) -> Fee:
        return Fee(type=self.fee_type, amount=self.amount, description=self.description)

    def decorate(self, component: RateComponent, declared_value: Optional[float] = None) -> RateDecorator:
        return RateDecorator(component, self.fee(declared_value))


class InsuranceFee(FeeRule):
    """$1 per $100 of declared value, minimum $2.50"""

    fee_type = FeeType.INSURANCE
    description = "Declared Value Insurance"
    rate_per_hundred = 1.0
    minimum = 2.50

    def applies(self, options, declared_value=None):
        return bool(declared_value and declared_value > 0)

    def fee(self, declared_value=None):
        amount = max((declared_value or 0) / 100 * self.rate_per_hundred, self.minimum)
        return Fee(type=self.fee_type, amount=amount, description=self.description)


class SignatureFee(FeeRule):
    fee_type = FeeType.SIGNATURE
    description = "Signature Required"
    amount = 5.50

    def applies(self, options, declared_value=None):
        return options.signature_required


class FragileHandlingFee(FeeRule):
    fee_type = FeeType.OTHER
    description = "Fragile Handling"
    amount = 10.00

    def applies(self, options, declared_value=None):
        return options.fragile_handling


class SaturdayDeliveryFee(FeeRule):
    fee_type = FeeType.SATURDAY_DELIVERY
    description = "Saturday Delivery"
    amount = 15.00

    def applies(self, options, declared_value=None):
        return options.saturday_delivery


FEE_RULES: Tuple[FeeRule, ...] = (
    InsuranceFee(),
    SignatureFee(),
    FragileHandlingFee(),
    SaturdayDeliveryFee(),
)


def apply_fees(
    component: RateComponent,
    options: ShippingOptions,
    declared_value: Optional[float] = None,
    rules: Tuple[FeeRule, ...] = FEE_RULES,
) -> RateComponent:
    """
    Wrap ``component`` with one decorator per active fee rule.

    Args:
        component: Base rate (or an already decorated rate)
        options: Requested shipping options
        declared_value: Value used by the insurance rule; defaults to
            ``options.declared_value``
        rules: Fee rules in application order

    Returns:
        The decorated component. ``component`` itself is left unchanged.
    """
    if declared_value is None:
        declared_value = options.declared_value

    return reduce(
        lambda decorated, rule: (
            rule.decorate(decorated, declared_value)
            if rule.applies(options, declared_value)
            else decorated
        ),
        rules,
        component,
    )


def fee_total(base: float, fees: List[Fee]) -> float:
    """Base price plus the sum of the (already cent-rounded) fee amounts"""
    return base + sum(fee.amount for fee in fees)


def decorate_rate(
    rate: ShippingRate,
    options: ShippingOptions,
    declared_value: Optional[float] = None,
) -> ShippingRate:
    """
    Apply the requested option fees to a carrier rate.

    Carrier-reported surcharges already on the rate (e.g. fuel) are kept
    ahead of the option fees. A rule whose service the carrier already
    charged for (signature, insurance, Saturday delivery) is skipped so the
    service is not billed twice. Returns a new ShippingRate; ``rate`` is not
    modified.
    """
    component: RateComponent = BaseRate(rate.base_rate, rate.service_name)
    for surcharge in rate.additional_fees:
        component = RateDecorator(component, surcharge)

    charged = {fee.type for fee in rate.additional_fees} - {FeeType.OTHER}
    rules = tuple(rule for rule in FEE_RULES if rule.fee_type not in charged)

    decorated = apply_fees(component, options, declared_value, rules)

    fees = decorated.get_fees()
    if len(fees) > len(rate.additional_fees):
        logger.debug(
            f"{rate.carrier.value} {rate.service_code}: added "
            f"{[fee.type.value for fee in fees[len(rate.additional_fees):]]}"
        )

    return rate.model_copy(
        update={
            "additional_fees": fees,
            "total_cost": decorated.get_cost(),
        }
    )
