"""
Puff menu.

Categories, their default prices and the puff types sold in each. Staff can
override the unit price on any order line; the menu only supplies defaults.
"""

from decimal import Decimal
from typing import Optional


SAVORY = 'Savory'
VEGGIE = 'Veggie'
SWEET = 'Sweet'

CATEGORIES = [SAVORY, VEGGIE, SWEET]

CATEGORY_PRICES = {
    SAVORY: Decimal('3.00'),
    VEGGIE: Decimal('2.75'),
    SWEET: Decimal('3.30'),
}

PUFF_TYPES = {
    SAVORY: [
        'Butter Chicken Puffs',
        'Chili Chicken Puffs',
        'Buffalo Chicken Puffs',
        'Barbacoa (slow-cooked, tender beef) Puffs with Consommé',
        'Cajun Alfredo Chicken with Sundried Tomatoes Puffs',
        'Bacon, Chicken & Pesto Puffs',
        'Brie, Prosciutto & Fig Jam Puffs',
    ],
    VEGGIE: [
        'Chickpea Masala Puffs',
        'Potato Masala Puffs',
        'Butter Paneer Puffs',
        'Chili-Infused Spinach and Feta Puffs',
    ],
    SWEET: [
        'Nutella Hazelnut Puffs',
        'Lemon Blackberry Cheesecake Puffs',
        'Berry Medley with Mascarpone and Lemon Curd Puffs',
        'Guava Cream Cheese Puffs',
        'Passion Fruit Mousse Puffs',
        'Dubai Chocolate Puffs',
    ],
}

# name -> category
_CATEGORY_BY_NAME = {
    name: category
    for category, names in PUFF_TYPES.items()
    for name in names
}


def get_menu():
    """Categories with their default price and puff types, in menu order."""
    return [
        {
            'category': category,
            'default_price': CATEGORY_PRICES[category],
            'items': list(PUFF_TYPES[category]),
        }
        for category in CATEGORIES
    ]


def category_for(name: str) -> Optional[str]:
    return _CATEGORY_BY_NAME.get(name)


def default_price(name: Optional[str] = None, category: Optional[str] = None) -> Decimal:
    """
    Default unit price for a puff.

    A known puff name wins; otherwise the category default is used. Unknown
    names in unknown categories cost 0 until staff enter a price.
    """
    if name:
        known_category = category_for(name)
        if known_category:
            return CATEGORY_PRICES[known_category]
    if category in CATEGORY_PRICES:
        return CATEGORY_PRICES[category]
    return Decimal('0.00')
