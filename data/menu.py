"""默认饮品目录（数据库为空时写入）"""

DRINK_CATALOG = [
    {
        "name": "Americano",
        "slug": "americano",
        "type": "coffee",
        "base_price": 2.80,
        "has_milk": False,
        "allowed_sizes": ["small", "medium", "large"],
        "components": ["espresso", "hot water"],
    },
    {
        "name": "Cappuccino",
        "slug": "cappuccino",
        "type": "coffee",
        "base_price": 3.20,
        "has_milk": True,
        "allowed_sizes": ["small", "medium", "large"],
        "components": ["espresso", "steamed milk", "milk foam"],
    },
    {
        "name": "Chai Latte",
        "slug": "chai-latte",
        "type": "tea",
        "base_price": 3.40,
        "has_milk": True,
        "allowed_sizes": ["small", "medium", "large"],
        "components": ["black tea", "spices", "steamed milk"],
    },
    {
        "name": "Earl Grey",
        "slug": "earl-grey",
        "type": "tea",
        "base_price": 2.20,
        "has_milk": False,
        "allowed_sizes": ["small", "medium", "large"],
        "components": ["black tea", "bergamot", "hot water"],
    },
    {
        "name": "Espresso",
        "slug": "espresso",
        "type": "coffee",
        "base_price": 2.50,
        "has_milk": False,
        "allowed_sizes": ["small"],
        "components": ["espresso"],
    },
    {
        "name": "Flat White",
        "slug": "flat-white",
        "type": "coffee",
        "base_price": 3.50,
        "has_milk": True,
        "allowed_sizes": ["small", "medium"],
        "components": ["double espresso", "microfoam milk"],
    },
    {
        "name": "Green Tea",
        "slug": "green-tea",
        "type": "tea",
        "base_price": 2.00,
        "has_milk": False,
        "allowed_sizes": ["small", "medium", "large"],
        "components": ["green tea", "hot water"],
    },
    {
        "name": "Latte",
        "slug": "latte",
        "type": "coffee",
        "base_price": 3.00,
        "has_milk": True,
        "allowed_sizes": ["small", "medium", "large"],
        "components": ["espresso", "steamed milk"],
    },
    {
        "name": "Matcha Latte",
        "slug": "matcha-latte",
        "type": "tea",
        "base_price": 3.80,
        "has_milk": True,
        "allowed_sizes": ["medium", "large"],
        "components": ["matcha", "steamed milk"],
    },
]
