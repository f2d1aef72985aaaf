"""Starter rule sets for known card products.

Each entry describes a card and the rules a new card of that product starts
with. Rules omit ``product_id``; the registry fills it in when seeding.
"""

from typing import Any

AIRLINE_MCCS = [str(code) for code in range(3000, 4000)]

CITI_TRAVEL_EXCLUSIONS = AIRLINE_MCCS + [
    "4511", "7512", "7011", "4111", "4112", "4789", "4411", "4722", "4723", "5962", "7012",
]

DEPARTMENT_STORE_MCCS = ["5311", "5611", "5621", "5631", "5641", "5651", "5655", "5661", "5691", "5699", "5948"]

UOB_ONLINE_ELIGIBLE_MCCS = [
    "4816", "5262", "5306", "5309", "5310", "5311", "5331", "5399",
    "5611", "5621", "5631", "5641", "5651", "5661", "5691", "5699",
    "5732", "5733", "5734", "5735", "5912", "5942", "5944", "5945",
    "5946", "5947", "5948", "5949", "5964", "5965", "5966", "5967",
    "5968", "5969", "5970", "5992", "5999", "5811", "5812", "5814",
    "5333", "5411", "5441", "5462", "5499", "8012", "9751", "7278",
    "7832", "7841", "7922", "7991", "7996", "7998", "7999",
]

GAS_MCCS = ["5541", "5542"]
GROCERY_MCCS = ["5411", "5422", "5441", "5451", "5462"]
RESTAURANT_MCCS = ["5811", "5812", "5813", "5814"]
TRANSIT_MCCS = ["4111", "4121", "4131", "4789", "4011"]
FLIGHT_MCCS = [str(code) for code in range(3000, 3300)] + ["4511"]
HOTEL_MCCS = [str(code) for code in range(3501, 3800)] + ["7011"]
AFKLM_MERCHANTS = ["Air France", "AIRFRANCE", "KLM"]


def _standard(
    bonus: float = 0,
    base: float = 1,
    points: str = "nearest",
    amount: str = "none",
    cap_spend: float | None = None,
    cap_group: str | None = None,
) -> dict[str, Any]:
    """Per-dollar earning: ``base`` plus ``bonus`` points for every whole unit of spend."""
    reward: dict[str, Any] = {
        "calculation_method": "standard",
        "base_multiplier": base,
        "bonus_multiplier": bonus,
        "points_rounding_strategy": points,
        "amount_rounding_strategy": amount,
        "block_size": 1,
    }
    if cap_spend is not None:
        reward.update(monthly_cap=cap_spend, monthly_cap_type="spend_amount", cap_group_id=cap_group)
    return reward


def _everything_else(name: str, description: str, **reward: Any) -> dict[str, Any]:
    return {
        "name": name,
        "description": description,
        "priority": 1,
        "conditions": [],
        "reward": _standard(**reward),
    }


def _online() -> dict[str, Any]:
    return {"type": "transaction_type", "operation": "equals", "values": ["online"]}


CARD_PRESETS: list[dict[str, Any]] = [
    {
        "key": "dbs-womans-world-mastercard",
        "issuer": "DBS",
        "name": "Woman's World MasterCard",
        "points_currency": "DBS Points",
        "rules": [
            {
                "name": "Online Shopping 10X",
                "description": "10X DBS Points (20 miles) on online spend",
                "priority": 10,
                "conditions": [_online()],
                "reward": {
                    "calculation_method": "standard",
                    "base_multiplier": 1,
                    "bonus_multiplier": 9,
                    "points_rounding_strategy": "floor",
                    "amount_rounding_strategy": "floor-to-block",
                    "block_size": 5,
                    "monthly_cap": 2700,
                    "points_currency": "DBS Points",
                },
            },
        ],
    },
    {
        "key": "citibank-rewards-visa-signature",
        "issuer": "Citibank",
        "name": "Rewards Visa Signature",
        "points_currency": "ThankYou Points",
        "rules": [
            {
                "name": "Citibank Rewards 10X",
                "description": "10X ThankYou Points on online & department store shopping",
                "priority": 10,
                "conditions": [
                    {
                        "type": "compound",
                        "operation": "any",
                        "sub_conditions": [
                            {
                                "type": "compound",
                                "operation": "all",
                                "sub_conditions": [
                                    _online(),
                                    {"type": "mcc", "operation": "exclude", "values": CITI_TRAVEL_EXCLUSIONS},
                                ],
                            },
                            {"type": "mcc", "operation": "include", "values": DEPARTMENT_STORE_MCCS},
                        ],
                    },
                ],
                "reward": {
                    "calculation_method": "standard",
                    "base_multiplier": 1,
                    "bonus_multiplier": 9,
                    "points_rounding_strategy": "floor",
                    "amount_rounding_strategy": "floor",
                    "block_size": 1,
                    "monthly_cap": 9000,
                    "points_currency": "ThankYou Points",
                },
            },
        ],
    },
    {
        "key": "uob-preferred-visa-platinum",
        "issuer": "UOB",
        "name": "Preferred Visa Platinum",
        "points_currency": "UNI$",
        "rules": [
            {
                "name": "UOB Platinum 10X",
                "description": "10X UNI$ (4 miles) on online or contactless spending",
                "priority": 10,
                "conditions": [],
                "reward": {
                    "calculation_method": "standard",
                    "base_multiplier": 1,
                    "bonus_multiplier": 0,
                    "points_rounding_strategy": "floor",
                    "amount_rounding_strategy": "floor-to-block",
                    "block_size": 5,
                    "monthly_cap": 2000,
                    "points_currency": "UNI$",
                    "bonus_tiers": [
                        {
                            "name": "Contactless Payments",
                            "priority": 1,
                            "multiplier": 9,
                            "condition": {"type": "transaction_type", "operation": "equals", "values": ["contactless"]},
                        },
                        {
                            "name": "Online with Eligible MCCs",
                            "priority": 1,
                            "multiplier": 9,
                            "condition": {
                                "type": "compound",
                                "operation": "all",
                                "sub_conditions": [
                                    _online(),
                                    {"type": "mcc", "operation": "include", "values": UOB_ONLINE_ELIGIBLE_MCCS},
                                ],
                            },
                        },
                    ],
                },
            },
        ],
    },
    {
        "key": "uob-ladys-solitaire-world-mastercard",
        "issuer": "UOB",
        "name": "Lady's Solitaire",
        "points_currency": "UNI$",
        "available_categories": [
            "Beauty & Wellness", "Dining", "Entertainment", "Family", "Fashion", "Transport", "Travel",
        ],
        "max_categories_selectable": 2,
        "rules": [
            {
                "name": "Selected Categories 10X",
                "description": "10X UNI$ (4 miles) on spending in selected categories",
                "priority": 10,
                # filled with the cardholder's chosen categories after seeding
                "conditions": [{"type": "category", "operation": "include", "values": []}],
                "reward": {
                    "calculation_method": "standard",
                    "base_multiplier": 1,
                    "bonus_multiplier": 9,
                    "points_rounding_strategy": "floor",
                    "amount_rounding_strategy": "floor-to-block",
                    "block_size": 5,
                    "monthly_cap": 3600,
                    "points_currency": "UNI$",
                },
            },
        ],
    },
    {
        "key": "uob-visa-signature",
        "issuer": "UOB",
        "name": "Visa Signature",
        "points_currency": "UNI$",
        "rules": [
            {
                "name": "Foreign Currency 10X",
                "description": "10X UNI$ (4 miles) on all foreign currency spend",
                "priority": 10,
                "conditions": [{"type": "currency", "operation": "exclude", "values": ["SGD"]}],
                "reward": {
                    "calculation_method": "standard",
                    "base_multiplier": 1,
                    "bonus_multiplier": 9,
                    "points_rounding_strategy": "floor",
                    "amount_rounding_strategy": "floor-to-block",
                    "block_size": 5,
                    "monthly_cap": 3600,
                    "monthly_min_spend": 1000,
                    "spend_period_type": "statement",
                    "points_currency": "UNI$",
                },
            },
        ],
    },
    {
        "key": "ocbc-rewards-world-mastercard",
        "issuer": "OCBC",
        "name": "Rewards World Mastercard",
        "points_currency": "OCBC$",
        "rules": [
            {
                "name": "OCBC Rewards World Tiered Bonus",
                "description": "Tiered bonus points on shopping, dining, and e-commerce",
                "priority": 10,
                "conditions": [],
                "reward": {
                    "calculation_method": "standard",
                    "base_multiplier": 1,
                    "bonus_multiplier": 0,
                    "points_rounding_strategy": "floor",
                    "amount_rounding_strategy": "floor-to-block",
                    "block_size": 5,
                    "monthly_cap": 10000,
                    "points_currency": "OCBC$",
                    "bonus_tiers": [
                        {
                            "name": "Tier 1 - Selected Retail",
                            "priority": 1,
                            "multiplier": 14,
                            "condition": {
                                "type": "compound",
                                "operation": "any",
                                "sub_conditions": [
                                    {"type": "mcc", "operation": "include", "values": ["5311"]},
                                    {"type": "merchant", "operation": "include", "values": ["Watsons"]},
                                ],
                            },
                        },
                        {
                            "name": "Tier 2 - Shopping & Dining",
                            "priority": 2,
                            "multiplier": 9,
                            "condition": {
                                "type": "mcc",
                                "operation": "include",
                                "values": [
                                    "5309", "5611", "5621", "5641", "5651", "5655", "5661", "5691",
                                    "5699", "5941", "5948",
                                ],
                            },
                        },
                    ],
                },
            },
        ],
    },
    {
        "key": "amex-platinum-credit-sg",
        "issuer": "American Express",
        "name": "Platinum Credit",
        "points_currency": "Membership Rewards Points",
        "rules": [
            {
                "name": "Amex Platinum Credit Base Earning",
                "description": "2 Membership Rewards points for every $1.60 spent",
                "priority": 10,
                "conditions": [],
                "reward": {
                    "calculation_method": "standard",
                    "base_multiplier": 2,
                    "points_rounding_strategy": "floor",
                    "block_size": 1.6,
                    "points_currency": "Membership Rewards Points",
                },
            },
        ],
    },
    {
        "key": "amex-platinum-sg",
        "issuer": "American Express",
        "name": "Platinum Singapore",
        "points_currency": "Membership Rewards Points",
        "rules": [
            {
                "name": "Amex Platinum Singapore Base Earning",
                "description": "2 Membership Rewards points for every $1.60 spent",
                "priority": 10,
                "conditions": [],
                "reward": {
                    "calculation_method": "standard",
                    "base_multiplier": 2,
                    "points_rounding_strategy": "floor",
                    "block_size": 1.6,
                    "points_currency": "Membership Rewards Points",
                },
            },
        ],
    },
    {
        "key": "amex-platinum-ca",
        "issuer": "American Express",
        "name": "Platinum Canada",
        "points_currency": "Membership Rewards Points",
        "rules": [
            {
                "name": "Amex Platinum Canada Tiered Earning",
                "description": "Up to 3X MR points on travel and dining",
                "priority": 10,
                "conditions": [],
                "reward": {
                    "calculation_method": "direct",
                    "base_multiplier": 1,
                    "points_rounding_strategy": "nearest",
                    "block_size": 1,
                    "points_currency": "Membership Rewards Points",
                    "bonus_tiers": [
                        {
                            "name": "Amex Travel",
                            "priority": 1,
                            "multiplier": 2,
                            "condition": {"type": "merchant", "operation": "include", "values": ["Amex Travel"]},
                        },
                        {
                            "name": "Dining & Food Delivery in Canada",
                            "priority": 2,
                            "multiplier": 1,
                            "condition": {
                                "type": "compound",
                                "operation": "all",
                                "sub_conditions": [
                                    {
                                        "type": "mcc",
                                        "operation": "include",
                                        "values": ["5811", "5812", "5813", "5814", "5499"],
                                    },
                                    {"type": "currency", "operation": "equals", "values": ["CAD"]},
                                ],
                            },
                        },
                        {
                            "name": "Travel",
                            "priority": 3,
                            "multiplier": 1,
                            "condition": {
                                "type": "mcc",
                                "operation": "include",
                                "values": [str(code) for code in range(3000, 3200)] + [
                                    "7011", "7512", "4722", "4111", "4112", "4121", "4131", "4411", "4457",
                                    "4468", "4789",
                                ],
                            },
                        },
                    ],
                },
            },
        ],
    },
    {
        "key": "amex-cobalt",
        "issuer": "American Express",
        "name": "Cobalt",
        "points_currency": "Membership Rewards Points",
        "rules": [
            {
                "name": "Amex Cobalt Tiered Earning",
                "description": "Up to 5X MR points on eats & drinks, 2-3X on other categories",
                "priority": 10,
                "conditions": [],
                "reward": {
                    "calculation_method": "direct",
                    "base_multiplier": 1,
                    "points_rounding_strategy": "nearest",
                    "block_size": 1,
                    "points_currency": "Membership Rewards Points",
                    "bonus_tiers": [
                        {
                            "name": "Dining & Grocery",
                            "priority": 1,
                            "multiplier": 4,
                            "condition": {
                                "type": "mcc",
                                "operation": "include",
                                "values": ["5811", "5812", "5814", "5411", "5499"],
                            },
                        },
                        {
                            "name": "Streaming Services",
                            "priority": 2,
                            "multiplier": 2,
                            "condition": {
                                "type": "merchant",
                                "operation": "include",
                                "values": [
                                    "Apple TV+", "Apple Music", "Crave", "Disney+", "fuboTV", "hayu", "Netflix",
                                    "RDS", "SiriusXM Canada", "Spotify", "TSN",
                                ],
                            },
                        },
                        {
                            "name": "Travel & Transit",
                            "priority": 3,
                            "multiplier": 1,
                            "condition": {
                                "type": "compound",
                                "operation": "any",
                                "sub_conditions": [
                                    {"type": "mcc", "operation": "range", "values": ["3000", "3299"]},
                                    {
                                        "type": "mcc",
                                        "operation": "include",
                                        "values": ["7011", "7512", "4722", "4111", "4121", "4789", "7299", "4214"],
                                    },
                                    {"type": "mcc", "operation": "include", "values": GAS_MCCS},
                                ],
                            },
                        },
                    ],
                },
            },
        ],
    },
    {
        "key": "td-aeroplan-visa-infinite",
        "issuer": "TD",
        "name": "Aeroplan Visa Infinite",
        "points_currency": "Aeroplan Points",
        "rules": [
            {
                "name": "TD Aeroplan Visa Infinite 1.5X",
                "description": "1.5X Aeroplan points on gas, grocery, and Air Canada purchases",
                "priority": 10,
                "conditions": [
                    {
                        "type": "compound",
                        "operation": "any",
                        "sub_conditions": [
                            {"type": "mcc", "operation": "include", "values": GAS_MCCS},
                            {"type": "mcc", "operation": "include", "values": GROCERY_MCCS},
                            {"type": "merchant", "operation": "include", "values": ["Air Canada"]},
                        ],
                    },
                ],
                "reward": {
                    "calculation_method": "direct",
                    "base_multiplier": 1,
                    "bonus_multiplier": 0.5,
                    "points_rounding_strategy": "nearest",
                    "amount_rounding_strategy": "nearest",
                    "block_size": 1,
                    "points_currency": "Aeroplan Points",
                },
            },
            {
                "name": "TD Aeroplan Visa Infinite 1X",
                "description": "1 Aeroplan point per dollar on everything else",
                "priority": 0,
                "conditions": [],
                "reward": {
                    "calculation_method": "direct",
                    "base_multiplier": 1,
                    "points_rounding_strategy": "nearest",
                    "amount_rounding_strategy": "nearest",
                    "block_size": 1,
                    "points_currency": "Aeroplan Points",
                },
            },
        ],
    },
    {
        "key": "amex-green",
        "issuer": "American Express",
        "name": "Green",
        "points_currency": "Membership Rewards Points",
        "rules": [
            {
                "name": "3x Points on Restaurants",
                "description": "Earn 3 points per $1 at restaurants worldwide",
                "priority": 4,
                "conditions": [{"type": "mcc", "operation": "include", "values": RESTAURANT_MCCS}],
                "reward": _standard(bonus=2),
            },
            {
                "name": "3x Points on Flights",
                "description": "Earn 3 points per $1 on flights booked directly with airlines or amextravel.com",
                "priority": 3,
                "conditions": [{"type": "mcc", "operation": "include", "values": FLIGHT_MCCS}],
                "reward": _standard(bonus=2),
            },
            {
                "name": "3x Points on Transit",
                "description": "Earn 3 points per $1 on transit including rideshare",
                "priority": 2,
                "conditions": [{"type": "mcc", "operation": "include", "values": TRANSIT_MCCS}],
                "reward": _standard(bonus=2),
            },
            _everything_else("1x Points on All Other Purchases", "Earn 1 point per $1 on all other purchases"),
        ],
    },
    {
        "key": "amex-aeroplan-reserve",
        "issuer": "American Express",
        "name": "Aeroplan Reserve",
        "points_currency": "Aeroplan Points",
        "rules": [
            {
                "name": "3x Points on Air Canada",
                "description": "Earn 3 points per $1 on purchases made directly with Air Canada",
                "priority": 3,
                "conditions": [
                    {"type": "merchant", "operation": "include", "values": ["Air Canada", "AIRCANADA", "AC VACATIONS"]},
                ],
                "reward": _standard(bonus=2),
            },
            {
                "name": "2x Points on Dining & Food Delivery",
                "description": "Earn 2 points per $1 CAD at restaurants, coffee shops, bars, and food delivery",
                "priority": 2,
                "conditions": [
                    {"type": "mcc", "operation": "include", "values": RESTAURANT_MCCS + ["5499"]},
                    {"type": "currency", "operation": "equals", "values": ["CAD"]},
                ],
                "reward": _standard(bonus=1),
            },
            _everything_else(
                "1.25x Points on All Other Purchases",
                "Earn 1.25 points per $1 on all other eligible purchases",
                base=1.25,
            ),
        ],
    },
    {
        "key": "neo-cathay-world-elite",
        "issuer": "Neo Financial",
        "name": "Cathay World Elite Mastercard",
        "points_currency": "Asia Miles",
        "rules": [
            {
                "name": "4x Asia Miles on Cathay Pacific (MCC)",
                "description": "Earn 4 Asia Miles per $1 on Cathay Pacific flights (matched by MCC 3099)",
                "priority": 4,
                "conditions": [{"type": "mcc", "operation": "include", "values": ["3099"]}],
                "reward": _standard(bonus=3, points="floor", amount="ceiling"),
            },
            {
                "name": "4x Asia Miles on Cathay Pacific (Merchant)",
                "description": "Earn 4 Asia Miles per $1 on Cathay Pacific flights (matched by merchant name)",
                "priority": 3,
                "conditions": [
                    {
                        "type": "merchant",
                        "operation": "include",
                        "values": ["Cathay Pacific", "CATHAYPACIFIC", "CATHAYPACAIR"],
                    },
                ],
                "reward": _standard(bonus=3, points="floor", amount="ceiling"),
            },
            {
                "name": "2x Asia Miles on Foreign Currency",
                "description": "Earn 2 Asia Miles per $1 on foreign currency transactions",
                "priority": 2,
                "conditions": [{"type": "currency", "operation": "not_equals", "values": ["CAD"]}],
                "reward": _standard(bonus=1, points="floor", amount="ceiling"),
            },
            _everything_else(
                "1x Asia Miles on All Other Purchases",
                "Earn 1 Asia Mile per $1 on all other purchases",
                points="floor",
                amount="ceiling",
            ),
        ],
    },
    {
        "key": "hsbc-revolution",
        "issuer": "HSBC",
        "name": "Revolution",
        "points_currency": "HSBC Points",
        "rules": [
            {
                "name": "10x Points on Online Travel & Contactless",
                "description": "Earn 10 points per $1 on online travel bookings and contactless payments",
                "priority": 2,
                "conditions": [
                    {
                        "type": "mcc",
                        "operation": "include",
                        "values": ["5815", "5816", "5817", "5818"] + FLIGHT_MCCS + HOTEL_MCCS,
                    },
                ],
                "reward": _standard(bonus=9),
            },
            _everything_else("1x Points on All Other Purchases", "Earn 1 point per $1 on all other purchases"),
        ],
    },
    {
        "key": "brim-air-france-klm",
        "issuer": "Brim Financial",
        "name": "Air France KLM World Elite",
        "points_currency": "Flying Blue Miles",
        "rules": [
            {
                "name": "6x Flying Blue Miles on AF/KLM (EUR)",
                "description": "Earn 6 Flying Blue miles per 1 EUR on Air France and KLM purchases in EUR",
                "priority": 4,
                "conditions": [
                    {"type": "merchant", "operation": "include", "values": AFKLM_MERCHANTS},
                    {"type": "currency", "operation": "equals", "values": ["EUR"]},
                ],
                "reward": _standard(bonus=5),
            },
            {
                "name": "4x Flying Blue Miles on AF/KLM (CAD)",
                "description": "Earn about 4 Flying Blue miles per $1 CAD on Air France and KLM purchases",
                "priority": 3,
                "conditions": [
                    {"type": "merchant", "operation": "include", "values": AFKLM_MERCHANTS},
                    {"type": "currency", "operation": "equals", "values": ["CAD"]},
                ],
                "reward": _standard(bonus=3),
            },
            {
                "name": "2x Flying Blue Miles on Restaurants",
                "description": "Earn 2 Flying Blue miles per $1 at restaurants",
                "priority": 2,
                "conditions": [{"type": "mcc", "operation": "include", "values": RESTAURANT_MCCS}],
                "reward": _standard(bonus=1),
            },
            _everything_else(
                "1x Flying Blue Miles on All Other Purchases",
                "Earn 1 Flying Blue mile per $1 on all other purchases",
            ),
        ],
    },
    {
        "key": "mbna-amazon-rewards",
        "issuer": "MBNA",
        "name": "Amazon.ca Rewards Mastercard",
        "points_currency": "Amazon Points",
        "rules": [
            {
                "name": "2.5x Points on Amazon.ca (Promo)",
                "description": "Earn 2.5 points per $1 on Amazon.ca purchases (up to $3,000/month)",
                "priority": 4,
                "conditions": [{"type": "merchant", "operation": "include", "values": ["Amazon"]}],
                "reward": _standard(bonus=1.5, cap_spend=3000, cap_group="mbna-amazon-promo-2.5x"),
            },
            {
                "name": "2.5x Points on Groceries, Dining & Amazon (Promo)",
                "description": "Earn 2.5 points per $1 on groceries and dining (up to $3,000/month)",
                "priority": 3,
                "conditions": [
                    {"type": "mcc", "operation": "include", "values": GROCERY_MCCS[:4] + RESTAURANT_MCCS},
                ],
                "reward": _standard(bonus=1.5, cap_spend=3000, cap_group="mbna-amazon-promo-2.5x"),
            },
            {
                "name": "1.5x Points on Amazon.ca",
                "description": "Earn 1.5 points per $1 on Amazon.ca purchases; enable when the promotion ends",
                "enabled": False,
                "priority": 2,
                "conditions": [{"type": "merchant", "operation": "include", "values": ["Amazon"]}],
                "reward": _standard(bonus=0.5),
            },
            _everything_else("1x Points on All Other Purchases", "Earn 1 point per $1 on all other purchases"),
        ],
    },
]

# (issuer terms, name terms, preset key) for cards added under a loose name.
PRESET_MATCHERS: list[tuple[tuple[str, ...], tuple[str, ...], str]] = [
    (("american express", "amex"), ("cobalt",), "amex-cobalt"),
    (("american express", "amex"), ("platinum",), "amex-platinum-ca"),
    (("american express", "amex"), ("green",), "amex-green"),
    (("american express", "amex"), ("aeroplan", "reserve"), "amex-aeroplan-reserve"),
    (("neo",), ("cathay",), "neo-cathay-world-elite"),
    (("hsbc",), ("revolution",), "hsbc-revolution"),
    (("brim",), ("air france",), "brim-air-france-klm"),
    (("mbna",), ("amazon",), "mbna-amazon-rewards"),
]
