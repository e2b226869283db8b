"""Tests for menu models."""

from decimal import Decimal

from django.core.exceptions import ValidationError

import pytest

from apps.web.core.tests.factories import RestaurantFactory
from apps.web.restaurant.models import MenuCategory, MenuItem

from .factories import MenuCategoryFactory, MenuItemFactory


@pytest.mark.django_db
class TestMenuCategory:
    """Tests for MenuCategory model."""

    def test_create_category(self) -> None:
        category = MenuCategoryFactory(name="Starters", restaurant__name="Pizza Palace")

        assert category.pk is not None
        assert str(category) == "Pizza Palace > Starters"

    def test_ordered_by_display_order_then_name(self) -> None:
        restaurant = RestaurantFactory()
        MenuCategoryFactory(restaurant=restaurant, name="Mains", display_order=2)
        MenuCategoryFactory(restaurant=restaurant, name="Drinks", display_order=1)
        MenuCategoryFactory(restaurant=restaurant, name="Bread", display_order=1)

        names = [c.name for c in MenuCategory.objects.filter(restaurant=restaurant)]

        assert names == ["Bread", "Drinks", "Mains"]

    def test_display_order_not_unique(self) -> None:
        restaurant = RestaurantFactory()
        MenuCategoryFactory(restaurant=restaurant, display_order=1)
        MenuCategoryFactory(restaurant=restaurant, display_order=1)

        assert restaurant.categories.count() == 2


@pytest.mark.django_db
class TestMenuItem:
    """Tests for MenuItem model."""

    def test_price_keeps_two_decimals(self) -> None:
        item = MenuItemFactory(price=Decimal("149.00"))
        item.refresh_from_db()

        assert item.price == Decimal("149.00")

    def test_negative_price_invalid(self) -> None:
        item = MenuItemFactory.build(category=MenuCategoryFactory(), price=Decimal("-0.01"))

        with pytest.raises(ValidationError) as exc_info:
            item.full_clean()
        assert "price" in exc_info.value.message_dict

    def test_vegetarian_and_vegan_may_both_be_set(self) -> None:
        item = MenuItemFactory(is_vegetarian=True, is_vegan=True)
        item.full_clean()

        assert item.is_veg is True

    def test_is_veg(self) -> None:
        assert MenuItemFactory.build(is_vegan=True).is_veg is True
        assert MenuItemFactory.build(is_vegetarian=True).is_veg is True
        assert MenuItemFactory.build().is_veg is False

    def test_deleted_with_category(self) -> None:
        item = MenuItemFactory()
        item.category.delete()

        assert not MenuItem.objects.filter(pk=item.pk).exists()
