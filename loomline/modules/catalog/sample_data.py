"""
Sample catalog used to seed an empty database.
"""

from datetime import datetime

from ...core.database import db, Database
from .models import Product

SAMPLE_PRODUCTS = [
    {
        'name': 'NylonSpinner 3000 Pro',
        'description': 'High-speed nylon spinning machine with advanced temperature control '
                       'for consistent fiber quality and maximum productivity.',
        'category': 'Spinning Machines',
        'features': [
            'Automatic temperature regulation',
            'Variable speed control from 1000-5000 RPM',
            'Integrated cooling system',
            'Touch screen interface',
        ],
        'specifications': {
            'Dimensions': '2.5m x 1.8m x 2.2m',
            'Weight': '1200 kg',
            'Power': '380V, 22kW',
            'Capacity': '500 kg/day',
        },
        'featured': True,
        'created_at': datetime(2023, 5, 15),
        'price': '$45,000',
        'original_price': '$52,000',
        'rating': 4.8,
        'reviews': 24,
        'in_stock': True,
        'discount': 13,
    },
    {
        'name': 'ExtruderPro X7 Elite',
        'description': 'Industrial-grade nylon extruder with precision die control and multiple '
                       'heating zones for superior output quality.',
        'category': 'Extruders',
        'features': [
            '7 independent heating zones',
            'Digital pressure monitoring',
            'Automatic die cleaning system',
            'Energy-efficient motors',
        ],
        'specifications': {
            'Dimensions': '3.2m x 1.2m x 1.6m',
            'Weight': '1800 kg',
            'Power': '415V, 35kW',
            'Capacity': '750 kg/day',
        },
        'featured': True,
        'created_at': datetime(2023, 8, 22),
        'price': '$68,500',
        'original_price': '$75,000',
        'rating': 4.9,
        'reviews': 18,
        'in_stock': True,
        'discount': 9,
    },
    {
        'name': 'TwistMaster 2500 Advanced',
        'description': 'Precision twisting machine for nylon yarn with adjustable tension control '
                       'and automated package handling.',
        'category': 'Twisting Machines',
        'features': [
            'Electronic tension control',
            'Automatic package doffing',
            'Spindle speed up to 12,000 RPM',
            'Low vibration operation',
        ],
        'specifications': {
            'Dimensions': '4.5m x 1.5m x 2.0m',
            'Weight': '1500 kg',
            'Power': '380V, 18kW',
            'Capacity': '600 kg/day',
        },
        'featured': False,
        'created_at': datetime(2023, 11, 10),
        'price': '$38,900',
        'rating': 4.6,
        'reviews': 31,
        'in_stock': True,
    },
    {
        'name': 'HeatSet 1800 Premium',
        'description': 'Continuous heat setting machine for nylon fibers with precise temperature '
                       'control and energy efficiency.',
        'category': 'Heat Treatment',
        'features': [
            'Digital temperature control ±1°C',
            'Variable speed conveyor',
            'Multiple heating chambers',
            'Automatic cooling zone',
        ],
        'specifications': {
            'Dimensions': '6.0m x 2.0m x 2.2m',
            'Weight': '2200 kg',
            'Power': '415V, 45kW',
            'Capacity': '800 kg/day',
        },
        'featured': False,
        'created_at': datetime(2024, 1, 5),
        'price': '$55,200',
        'original_price': '$62,000',
        'rating': 4.7,
        'reviews': 15,
        'in_stock': False,
        'discount': 11,
    },
    {
        'name': 'DrawLine 5000 Ultra',
        'description': 'Multi-stage drawing line for nylon fibers with precision tension control '
                       'and automated threading system.',
        'category': 'Drawing Machines',
        'features': [
            '5-stage drawing process',
            'Individual godet speed control',
            'Heated godets with PID control',
            'Automatic threading system',
        ],
        'specifications': {
            'Dimensions': '8.5m x 2.2m x 2.5m',
            'Weight': '3500 kg',
            'Power': '415V, 60kW',
            'Capacity': '1000 kg/day',
        },
        'featured': True,
        'created_at': datetime(2024, 2, 18),
        'price': '$89,000',
        'original_price': '$98,000',
        'rating': 4.9,
        'reviews': 12,
        'in_stock': True,
        'discount': 9,
    },
    {
        'name': 'PolyMix 1200 Smart',
        'description': 'Advanced polymer mixing system for nylon compound preparation with '
                       'intelligent recipe management.',
        'category': 'Mixing Equipment',
        'features': [
            'Vacuum mixing chamber',
            'Automatic additive dispensing',
            'Temperature and humidity control',
            'Recipe management system',
        ],
        'specifications': {
            'Dimensions': '2.8m x 2.5m x 3.0m',
            'Weight': '1600 kg',
            'Power': '380V, 25kW',
            'Capacity': '1200 kg/day',
        },
        'featured': False,
        'created_at': datetime(2023, 9, 30),
        'price': '$42,800',
        'rating': 4.5,
        'reviews': 22,
        'in_stock': True,
    },
]


def seed_sample_products(force=False):
    """Insert the sample machines. Skips a non-empty table unless force is set.

    Returns the number of products inserted.
    """
    if not force and Product.query.first() is not None:
        return 0

    for data in SAMPLE_PRODUCTS:
        db.session.add(Product(**data))
    Database.commit()
    return len(SAMPLE_PRODUCTS)
