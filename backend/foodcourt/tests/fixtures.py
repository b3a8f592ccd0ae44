"""
Shared test fixtures for all backend tests.

This module provides reusable pytest fixtures for common test objects
like users, menu items and orders.
"""
import pytest

from users.models import User
from menu.models import FoodItem
from orders.models import Order
from orders.services import OrderService


# ============================================================================
# USER FIXTURES
# ============================================================================

@pytest.fixture
def student_user(db):
    """Create a student (the default role)"""
    return User.objects.create_user(
        email='student@campus.edu',
        password='password123',
        name='Asha Student',
    )


@pytest.fixture
def other_student(db):
    """Create a second student for ownership checks"""
    return User.objects.create_user(
        email='other@campus.edu',
        password='password123',
        name='Ravi Other',
    )


@pytest.fixture
def manager_user(db):
    """Create a manager with dashboard access"""
    return User.objects.create_user(
        email='manager@campus.edu',
        password='password123',
        name='Meera Manager',
        role=User.Role.MANAGER,
    )


@pytest.fixture
def admin_user(db):
    """Create an admin who can review requests and change roles"""
    return User.objects.create_user(
        email='admin@campus.edu',
        password='password123',
        name='Arjun Admin',
        role=User.Role.ADMIN,
    )


# ============================================================================
# MENU FIXTURES
# ============================================================================

@pytest.fixture
def masala_dosa(db):
    return FoodItem.objects.create(
        name='Masala Dosa',
        description='Crispy dosa with potato filling',
        price=80,
        category=FoodItem.Category.MEALS,
        preparation_time=12,
    )


@pytest.fixture
def filter_coffee(db):
    return FoodItem.objects.create(
        name='Filter Coffee',
        description='South Indian filter coffee',
        price=30,
        category=FoodItem.Category.BEVERAGES,
        preparation_time=3,
    )


@pytest.fixture
def samosa(db):
    return FoodItem.objects.create(
        name='Samosa',
        description='Two samosas with chutney',
        price=50,
        category=FoodItem.Category.SNACKS,
        preparation_time=5,
    )


@pytest.fixture
def sold_out_item(db):
    return FoodItem.objects.create(
        name='Gulab Jamun',
        price=40,
        category=FoodItem.Category.DESSERTS,
        is_available=False,
    )


def line_for(food_item, quantity=1):
    """Cart-style line item snapshot for a menu item."""
    return {
        'food_item_id': str(food_item.id),
        'name': food_item.name,
        'price': food_item.price,
        'image_url': food_item.image_url,
        'preparation_time': food_item.preparation_time,
        'quantity': quantity,
    }


# ============================================================================
# ORDER FIXTURES
# ============================================================================

@pytest.fixture
def placed_order(student_user, masala_dosa, filter_coffee):
    """A reconciled order in 'ordered' status: 2 x 80 + 1 x 30 = 190"""
    return OrderService.create_order(
        user=student_user,
        line_items=[line_for(masala_dosa, 2), line_for(filter_coffee, 1)],
        payment_method=Order.PaymentMethod.UPI,
        creator_name='Asha',
    )


@pytest.fixture
def preparing_order(placed_order):
    return OrderService.advance_status(placed_order.id, Order.OrderStatus.PREPARING)
