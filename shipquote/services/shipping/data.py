"""
Sample carrier payloads

Canned responses, in each carrier's native shape, returned when a carrier
has no live credentials configured. They are static so quotes built from
them are reproducible.
"""

# USPS RateV4 (as decoded by xmltodict)
usps_sample_postage = [
    {"@CLASSID": "1", "MailService": "PRIORITY_MAIL", "Rate": "28.95"},
    {"@CLASSID": "3", "MailService": "PRIORITY_MAIL_EXPRESS", "Rate": "45.50"},
    {"@CLASSID": "1058", "MailService": "GROUND_ADVANTAGE", "Rate": "12.50"},
]

# FedEx Rate Quote API - US and international routes
fedex_sample_rate_details = [
    {
        "serviceType": "FEDEX_GROUND",
        "serviceName": "FedEx Ground",
        "serviceDescription": {"code": "90"},
        "ratedShipmentDetails": [
            {
                "rateType": "LIST",
                "totalBaseCharge": 55.10,
                "totalNetCharge": 59.34,
                "shipmentRateDetail": {
                    "surCharges": [
                        {"type": "FUEL", "description": "Fuel Surcharge", "amount": 4.24},
                    ]
                },
            },
            {
                "rateType": "ACCOUNT",
                "totalBaseCharge": 48.75,
                "totalNetCharge": 52.50,
                "shipmentRateDetail": {
                    "surCharges": [
                        {"type": "FUEL", "description": "Fuel Surcharge", "amount": 3.75},
                    ]
                },
            },
        ],
        "operationalDetail": {
            "transitTime": "FIVE_DAYS",
            "ineligibleForMoneyBackGuarantee": False,
        },
    },
    {
        "serviceType": "INTERNATIONAL_PRIORITY",
        "serviceName": "FedEx International Priority",
        "serviceDescription": {"code": "01"},
        "ratedShipmentDetails": [
            {
                "rateType": "ACCOUNT",
                "totalBaseCharge": 125.50,
                "totalNetCharge": 138.75,
                "shipmentRateDetail": {
                    "surCharges": [
                        {"type": "FUEL", "description": "Fuel Surcharge", "amount": 13.25},
                    ]
                },
            },
        ],
        "operationalDetail": {
            "transitTime": "TWO_DAYS",
            "ineligibleForMoneyBackGuarantee": False,
        },
    },
    {
        "serviceType": "INTERNATIONAL_ECONOMY",
        "serviceName": "FedEx International Economy",
        "serviceDescription": {"code": "03"},
        "ratedShipmentDetails": [
            {
                "rateType": "ACCOUNT",
                "totalBaseCharge": 75.25,
                "totalNetCharge": 83.10,
                "shipmentRateDetail": {
                    "surCharges": [
                        {"type": "FUEL", "description": "Fuel Surcharge", "amount": 7.85},
                    ]
                },
            },
        ],
        "operationalDetail": {
            "transitTime": "FOUR_DAYS",
            "ineligibleForMoneyBackGuarantee": False,
        },
    },
]

# FedEx Rate Quote API - UK domestic (GB -> GB)
fedex_sample_uk_rate_details = [
    {
        "serviceType": "FEDEX_UK_PRIORITY",
        "serviceName": "FedEx UK Priority",
        "serviceDescription": {"code": "UK1"},
        "ratedShipmentDetails": [
            {
                "rateType": "ACCOUNT",
                "totalBaseCharge": 12.99,
                "totalNetCharge": 15.49,
                "currency": "GBP",
                "shipmentRateDetail": {
                    "surCharges": [
                        {"type": "FUEL", "description": "Fuel Surcharge", "amount": 2.50},
                    ]
                },
            },
        ],
        "operationalDetail": {
            "transitTime": "ONE_DAY",
            "ineligibleForMoneyBackGuarantee": False,
        },
    },
    {
        "serviceType": "FEDEX_UK_STANDARD",
        "serviceName": "FedEx UK Standard",
        "serviceDescription": {"code": "UK2"},
        "ratedShipmentDetails": [
            {
                "rateType": "ACCOUNT",
                "totalBaseCharge": 8.99,
                "totalNetCharge": 10.79,
                "currency": "GBP",
                "shipmentRateDetail": {
                    "surCharges": [
                        {"type": "FUEL", "description": "Fuel Surcharge", "amount": 1.80},
                    ]
                },
            },
        ],
        "operationalDetail": {
            "transitTime": "TWO_DAYS",
            "ineligibleForMoneyBackGuarantee": False,
        },
    },
    {
        "serviceType": "FEDEX_UK_ECONOMY",
        "serviceName": "FedEx UK Economy",
        "serviceDescription": {"code": "UK3"},
        "ratedShipmentDetails": [
            {
                "rateType": "ACCOUNT",
                "totalBaseCharge": 5.99,
                "totalNetCharge": 7.19,
                "currency": "GBP",
                "shipmentRateDetail": {
                    "surCharges": [
                        {"type": "FUEL", "description": "Fuel Surcharge", "amount": 1.20},
                    ]
                },
            },
        ],
        "operationalDetail": {
            "transitTime": "THREE_DAYS",
            "ineligibleForMoneyBackGuarantee": True,
        },
    },
]

# UPS Rating API (Shop request)
ups_sample_rated_shipments = [
    {
        "Service": {"Code": "01", "Description": "UPS Next Day Air"},
        "TotalCharges": {"CurrencyCode": "USD", "MonetaryValue": "61.25"},
        "NegotiatedRateCharges": {
            "TotalCharge": {"CurrencyCode": "USD", "MonetaryValue": "55.50"}
        },
        "GuaranteedDelivery": {"BusinessDaysInTransit": "1"},
    },
    {
        "Service": {"Code": "02", "Description": "UPS 2nd Day Air"},
        "TotalCharges": {"CurrencyCode": "USD", "MonetaryValue": "36.10"},
        "NegotiatedRateCharges": {
            "TotalCharge": {"CurrencyCode": "USD", "MonetaryValue": "32.75"}
        },
        "GuaranteedDelivery": {"BusinessDaysInTransit": "2"},
    },
    {
        "Service": {"Code": "03", "Description": "UPS Ground"},
        "TotalCharges": {"CurrencyCode": "USD", "MonetaryValue": "21.05"},
    },
]
