"""
Shared test fixtures for all backend tests.

This module provides reusable pytest fixtures for common test objects
like staff users, menu items, addons and customers.

Menu fixtures mirror the café's real menu: a "Grilled Chicken" with 4oz/6oz/8oz
variants (6oz = 259.00) and a Quinoa addon priced 60.00 that the
"High Protein Meals" category presets to 50.00.
"""
import pytest
from decimal import Decimal

from users.models import User
from menu.models import Category, MenuItem, ItemVariant, Addon, CategoryAddon
from customers.models import Customer
from settings.models import GlobalSettings, StoreLocation


# ============================================================================
# USER FIXTURES
# ============================================================================

@pytest.fixture
def owner_user(db):
    """Create owner user"""
    return User.objects.create_user(
        email='owner@robusters.in',
        username='owner',
        password='password123',
        role=User.Role.OWNER,
    )


@pytest.fixture
def manager_user(db):
    """Create manager user"""
    return User.objects.create_user(
        email='manager@robusters.in',
        username='manager',
        password='password123',
        role=User.Role.MANAGER,
    )


@pytest.fixture
def cashier_user(db):
    """Create cashier user"""
    return User.objects.create_user(
        email='cashier@robusters.in',
        username='cashier',
        password='password123',
        role=User.Role.CASHIER,
    )


# ============================================================================
# SETTINGS FIXTURES
# ============================================================================

@pytest.fixture
def global_settings(db):
    """Global settings with the default 10 -> 1 loyalty ratio"""
    return GlobalSettings.load()


@pytest.fixture
def store_location(db):
    """Create the main outlet"""
    return StoreLocation.objects.create(
        name='Indiranagar',
        phone='080-4000-1234',
    )


# ============================================================================
# MENU FIXTURES
# ============================================================================

@pytest.fixture
def protein_category(db):
    """Create 'High Protein Meals' category"""
    return Category.objects.create(name='High Protein Meals', display_order=1)


@pytest.fixture
def drinks_category(db):
    """Create 'Drinks' category"""
    return Category.objects.create(name='Drinks', display_order=2)


@pytest.fixture
def grilled_chicken(protein_category):
    """Menu item priced entirely by its size variants"""
    item = MenuItem.objects.create(
        category=protein_category,
        name='Grilled Chicken',
        has_variants=True,
        variant_type=MenuItem.VariantType.SIZE,
        base_price=None,
    )
    ItemVariant.objects.create(menu_item=item, name='4oz', price=Decimal('199.00'), display_order=1)
    ItemVariant.objects.create(menu_item=item, name='6oz', price=Decimal('259.00'), display_order=2)
    ItemVariant.objects.create(menu_item=item, name='8oz', price=Decimal('319.00'), display_order=3)
    return item


@pytest.fixture
def variant_6oz(grilled_chicken):
    return grilled_chicken.variants.get(name='6oz')


@pytest.fixture
def variant_8oz(grilled_chicken):
    return grilled_chicken.variants.get(name='8oz')


@pytest.fixture
def cold_coffee(drinks_category):
    """Fixed-price menu item without variants"""
    return MenuItem.objects.create(
        category=drinks_category,
        name='Cold Coffee',
        base_price=Decimal('120.00'),
    )


@pytest.fixture
def quinoa_addon(protein_category):
    """Quinoa addon (60.00) preset to 50.00 for high protein meals"""
    addon = Addon.objects.create(
        name='Quinoa',
        price=Decimal('60.00'),
        unit='100g',
        addon_group='carbs',
    )
    CategoryAddon.objects.create(
        category=protein_category,
        addon=addon,
        price_override=Decimal('50.00'),
    )
    return addon


@pytest.fixture
def egg_addon(db):
    """Addon not linked to any category"""
    return Addon.objects.create(
        name='Boiled Egg',
        price=Decimal('20.00'),
        addon_group='proteins',
    )


# ============================================================================
# CUSTOMER FIXTURES
# ============================================================================

@pytest.fixture
def customer(db):
    """Create a regular customer with no loyalty balance"""
    return Customer.objects.create(
        phone='9876543210',
        email='asha@example.com',
        first_name='Asha',
        last_name='Rao',
    )


@pytest.fixture
def loyal_customer(db):
    """Create a customer with a large loyalty balance"""
    return Customer.objects.create(
        phone='9123456780',
        first_name='Vikram',
        last_name='Shetty',
        total_orders=40,
        total_spent=Decimal('15000.00'),
        loyalty_points=2000,
    )


# ============================================================================
# API CLIENT FIXTURES (for API Integration Tests)
# ============================================================================

@pytest.fixture
def api_client_factory():
    """
    Factory fixture for creating authenticated API clients.

    Issues a real access token for the user and sends it as a Bearer header,
    matching how the POS terminals call the API.

    Usage:
        def test_create_order(api_client_factory, cashier_user):
            client = api_client_factory(cashier_user)
            response = client.post('/api/orders/', {...}, format='json')
    """
    from rest_framework.test import APIClient
    from rest_framework_simplejwt.tokens import RefreshToken

    def _create_client(user=None):
        client = APIClient()
        if user:
            refresh = RefreshToken.for_user(user)
            client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return client

    return _create_client


@pytest.fixture
def cashier_client(api_client_factory, cashier_user):
    return api_client_factory(cashier_user)


@pytest.fixture
def manager_client(api_client_factory, manager_user):
    return api_client_factory(manager_user)
