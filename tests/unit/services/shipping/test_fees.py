# Fee composition unit tests
import dataclasses

import pytest

from shipquote.core.enums import CarrierName, FeeType
from shipquote.schemas.rates import Fee, ShippingOptions
from shipquote.services.shipping.fees import (
    BaseRate,
    FEE_RULES,
    FragileHandlingFee,
    InsuranceFee,
    RateDecorator,
    SaturdayDeliveryFee,
    SignatureFee,
    apply_fees,
    decorate_rate,
    fee_total,
)
from mocks import make_rate

"""
1. Individual fee rules
"""

@pytest.mark.parametrize(
    "declared_value,expected",
    [
        (100, 2.50),     # 1.00 is under the floor
        (250, 2.50),
        (500, 5.00),
        (1000, 10.00),
        (333.333, 3.33),
    ],
)
def test_insurance_fee_amount(declared_value, expected):
    """$1 per $100 declared, never below $2.50"""
    fee = InsuranceFee().fee(declared_value)

    assert fee.type == FeeType.INSURANCE
    assert fee.amount == pytest.approx(expected)
    assert fee.description == "Declared Value Insurance"


@pytest.mark.parametrize("declared_value", [None, 0])
def test_insurance_not_applied_without_declared_value(declared_value):
    assert InsuranceFee().applies(ShippingOptions(), declared_value) is False


def test_flat_fee_amounts():
    assert SignatureFee().fee().amount == 5.50
    assert SignatureFee().fee().type == FeeType.SIGNATURE
    assert FragileHandlingFee().fee().amount == 10.00
    assert FragileHandlingFee().fee().type == FeeType.OTHER
    assert SaturdayDeliveryFee().fee().amount == 15.00
    assert SaturdayDeliveryFee().fee().type == FeeType.SATURDAY_DELIVERY


def test_fee_amounts_are_rounded_to_cents():
    fee = Fee(type=FeeType.OTHER, amount=1.23456, description="Odd")
    assert fee.amount == 1.23


"""
2. Decorator behavior
"""

def test_insurance_then_signature_on_base_rate():
    """100.00 base + insurance on 500 declared + signature = 110.50"""
    base = BaseRate(100.00, "Standard")

    decorated = SignatureFee().decorate(InsuranceFee().decorate(base, 500), 500)

    assert decorated.get_cost() == pytest.approx(110.50)
    assert [fee.type for fee in decorated.get_fees()] == [FeeType.INSURANCE, FeeType.SIGNATURE]
    assert [fee.amount for fee in decorated.get_fees()] == [5.00, 5.50]
    assert decorated.get_description() == "Standard"


def test_decoration_leaves_inner_components_unchanged():
    base = BaseRate(100.00, "Standard")
    insured = InsuranceFee().decorate(base, 500)
    signed = SignatureFee().decorate(insured)

    assert base.get_cost() == 100.00
    assert base.get_fees() == []
    assert insured.get_cost() == pytest.approx(105.00)
    assert len(insured.get_fees()) == 1
    assert signed.component is insured


def test_decorators_are_immutable():
    decorated = SignatureFee().decorate(BaseRate(10.0, "Ground"))

    with pytest.raises(dataclasses.FrozenInstanceError):
        decorated.fee = Fee(type=FeeType.OTHER, amount=0, description="free")


def test_cost_does_not_depend_on_decoration_order():
    base = BaseRate(42.10, "Ground")
    fragile = FragileHandlingFee().fee()
    saturday = SaturdayDeliveryFee().fee()

    one_way = RateDecorator(RateDecorator(base, fragile), saturday)
    other_way = RateDecorator(RateDecorator(base, saturday), fragile)

    assert one_way.get_cost() == pytest.approx(other_way.get_cost())
    assert one_way.get_fees() != other_way.get_fees()


"""
3. apply_fees / decorate_rate
"""

def test_apply_fees_uses_canonical_order():
    options = ShippingOptions(
        signature_required=True,
        fragile_handling=True,
        saturday_delivery=True,
        declared_value=1000,
    )

    decorated = apply_fees(BaseRate(50.00, "Ground"), options)

    assert [fee.type for fee in decorated.get_fees()] == [
        FeeType.INSURANCE,
        FeeType.SIGNATURE,
        FeeType.OTHER,
        FeeType.SATURDAY_DELIVERY,
    ]
    assert decorated.get_cost() == pytest.approx(50.00 + 10.00 + 5.50 + 10.00 + 15.00)
    assert decorated.get_cost() == pytest.approx(fee_total(50.00, decorated.get_fees()))


def test_apply_fees_without_options_returns_component():
    base = BaseRate(12.50, "Ground Advantage")

    assert apply_fees(base, ShippingOptions()) is base


def test_apply_fees_explicit_declared_value_overrides_options():
    options = ShippingOptions(declared_value=100)

    decorated = apply_fees(BaseRate(10.0, "Ground"), options, declared_value=2000)

    assert decorated.get_fees()[0].amount == 20.00


def test_fee_rules_are_ordered():
    assert [type(rule) for rule in FEE_RULES] == [
        InsuranceFee,
        SignatureFee,
        FragileHandlingFee,
        SaturdayDeliveryFee,
    ]


def test_decorate_rate_saturday_only():
    rate = make_rate(CarrierName.UPS, "ups_ground", 21.05)

    decorated = decorate_rate(rate, ShippingOptions(saturday_delivery=True))

    assert len(decorated.additional_fees) == 1
    assert decorated.additional_fees[0].type == FeeType.SATURDAY_DELIVERY
    assert decorated.additional_fees[0].amount == 15.00
    assert decorated.total_cost == pytest.approx(36.05)
    assert decorated.base_rate == 21.05


def test_decorate_rate_keeps_carrier_surcharges_first():
    fuel = Fee(type=FeeType.FUEL, amount=3.75, description="Fuel Surcharge")
    rate = make_rate(CarrierName.FEDEX, "90", 48.75, fees=[fuel])

    decorated = decorate_rate(rate, ShippingOptions(signature_required=True))

    assert [fee.type for fee in decorated.additional_fees] == [FeeType.FUEL, FeeType.SIGNATURE]
    assert decorated.total_cost == pytest.approx(48.75 + 3.75 + 5.50)
    # Original rate is untouched
    assert rate.additional_fees == [fuel]
    assert rate.total_cost == pytest.approx(52.50)


def test_decorate_rate_total_is_base_plus_fees():
    rate = make_rate(CarrierName.USPS, "priority", 28.95)
    options = ShippingOptions(signature_required=True, fragile_handling=True)

    decorated = decorate_rate(rate, options, declared_value=400)

    assert decorated.total_cost == pytest.approx(
        decorated.base_rate + sum(fee.amount for fee in decorated.additional_fees)
    )
    assert decorated.display_price == f"${decorated.total_cost:.2f}"


def test_decorate_rate_does_not_double_charge_carrier_services():
    signature = Fee(type=FeeType.SIGNATURE, amount=6.25, description="Signature option")
    declared = Fee(type=FeeType.INSURANCE, amount=3.10, description="Declared value")
    rate = make_rate(CarrierName.FEDEX, "90", 40.00, fees=[signature, declared])
    options = ShippingOptions(signature_required=True, saturday_delivery=True, declared_value=500)

    decorated = decorate_rate(rate, options)

    assert [fee.type for fee in decorated.additional_fees] == [
        FeeType.SIGNATURE,
        FeeType.INSURANCE,
        FeeType.SATURDAY_DELIVERY,
    ]
    assert decorated.total_cost == pytest.approx(40.00 + 6.25 + 3.10 + 15.00)


def test_decorate_rate_other_surcharges_do_not_block_fragile_handling():
    residential = Fee(type=FeeType.OTHER, amount=4.00, description="Residential Delivery")
    rate = make_rate(CarrierName.FEDEX, "90", 40.00, fees=[residential])

    decorated = decorate_rate(rate, ShippingOptions(fragile_handling=True))

    assert [fee.description for fee in decorated.additional_fees] == [
        "Residential Delivery",
        "Fragile Handling",
    ]
    assert decorated.total_cost == pytest.approx(54.00)
