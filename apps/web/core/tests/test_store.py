"""Tests for the policy-guarded data store."""

import uuid
from datetime import timedelta
from decimal import Decimal

from django.utils import timezone

import pytest

from apps.web.core import store
from apps.web.core.auth import Caller
from apps.web.core.exceptions import AccessDenied, NotFound, ReferentialError, ValidationFailed
from apps.web.core.models import Restaurant, Role, UserRole
from apps.web.core.policy import Operation
from apps.web.restaurant.models import MenuCategory, MenuItem
from apps.web.restaurant.tests.factories import MenuCategoryFactory, MenuItemFactory

from .factories import RestaurantFactory, UserFactory, UserRoleFactory


@pytest.mark.django_db
class TestSelectAndGet:
    """Reads through the store."""

    def test_select_applies_policy(self, anonymous: Caller) -> None:
        active = RestaurantFactory()
        RestaurantFactory(is_active=False)

        assert list(store.select(anonymous, Restaurant)) == [active]

    def test_get_hidden_row_is_not_found(self, anonymous: Caller) -> None:
        inactive = RestaurantFactory(is_active=False)

        with pytest.raises(NotFound, match="Restaurant not found"):
            store.get(anonymous, Restaurant, inactive.pk)

    def test_get_malformed_id_is_not_found(self, admin_caller: Caller) -> None:
        with pytest.raises(NotFound):
            store.get(admin_caller, Restaurant, "not-a-uuid")

    def test_get_visible_row(self, admin_caller: Caller) -> None:
        inactive = RestaurantFactory(is_active=False)
        assert store.get(admin_caller, Restaurant, inactive.pk) == inactive


@pytest.mark.django_db
class TestInsert:
    """Inserts through the store."""

    def test_admin_inserts_restaurant(self, admin_caller: Caller) -> None:
        restaurant = store.insert(
            admin_caller, Restaurant, {"name": "Pizza Palace", "slug": "pizza-palace"}
        )

        assert restaurant.pk is not None
        assert restaurant.created_at is not None
        assert restaurant.theme_color == "#FF6B35"
        assert restaurant.font_family == "Inter"

    def test_plain_user_insert_denied(self, user_caller: Caller) -> None:
        with pytest.raises(AccessDenied):
            store.insert(user_caller, Restaurant, {"name": "Nope", "slug": "nope"})

        assert not Restaurant.objects.filter(slug="nope").exists()

    def test_relation_must_be_given_by_column(self, admin_caller: Caller) -> None:
        with pytest.raises(ValidationFailed) as exc_info:
            store.insert(
                admin_caller,
                MenuCategory,
                {"restaurant": str(uuid.uuid4()), "name": "Starters"},
            )

        assert exc_info.value.details == [{"field": "restaurant", "message": "Unknown field"}]
        assert not MenuCategory.objects.exists()

    def test_anonymous_insert_denied(self, anonymous: Caller) -> None:
        with pytest.raises(AccessDenied):
            store.insert(anonymous, Restaurant, {"name": "Nope", "slug": "nope"})

    def test_caller_timestamps_ignored(self, admin_caller: Caller) -> None:
        stale = timezone.now() - timedelta(days=365)
        restaurant = store.insert(
            admin_caller,
            Restaurant,
            {"name": "Cafe", "slug": "cafe", "created_at": stale, "updated_at": stale},
        )

        assert restaurant.created_at > stale
        assert restaurant.updated_at > stale

    def test_unknown_field_rejected(self, admin_caller: Caller) -> None:
        with pytest.raises(ValidationFailed) as exc_info:
            store.insert(admin_caller, Restaurant, {"name": "Cafe", "slug": "cafe", "owner": 1})

        assert exc_info.value.details == [{"field": "owner", "message": "Unknown field"}]

    def test_invalid_color_rejected(self, admin_caller: Caller) -> None:
        with pytest.raises(ValidationFailed) as exc_info:
            store.insert(
                admin_caller,
                Restaurant,
                {"name": "Cafe", "slug": "cafe", "theme_color": "orange"},
            )

        assert any(d["field"] == "theme_color" for d in exc_info.value.details)

    def test_negative_price_rejected(self, admin_caller: Caller) -> None:
        category = MenuCategoryFactory()
        with pytest.raises(ValidationFailed):
            store.insert(
                admin_caller,
                MenuItem,
                {"category_id": category.pk, "name": "Refund", "price": Decimal("-1.00")},
            )

    def test_missing_parent_is_referential_error(self, admin_caller: Caller) -> None:
        with pytest.raises(ReferentialError) as exc_info:
            store.insert(
                admin_caller,
                MenuCategory,
                {"restaurant_id": uuid.uuid4(), "name": "Starters"},
            )

        assert exc_info.value.code == "save_failed"
        assert not MenuCategory.objects.exists()

    def test_duplicate_slug_is_referential_error(self, admin_caller: Caller) -> None:
        RestaurantFactory(slug="taken")
        with pytest.raises(ReferentialError):
            store.insert(admin_caller, Restaurant, {"name": "Other", "slug": "taken"})

    def test_duplicate_global_grant_is_referential_error(self, admin_caller: Caller) -> None:
        user = UserFactory()
        UserRoleFactory(user=user, role=Role.MANAGER)

        with pytest.raises(ReferentialError):
            store.insert(admin_caller, UserRole, {"user_id": user.pk, "role": Role.MANAGER})


@pytest.mark.django_db
class TestUpdate:
    """Updates through the store."""

    def test_admin_updates_and_stamps(self, admin_caller: Caller) -> None:
        restaurant = RestaurantFactory(name="Old Name")
        before = restaurant.updated_at

        updated = store.update(admin_caller, Restaurant, restaurant.pk, {"name": "New Name"})

        restaurant.refresh_from_db()
        assert updated.name == "New Name"
        assert restaurant.name == "New Name"
        assert restaurant.updated_at > before

    def test_created_at_is_write_once(self, admin_caller: Caller) -> None:
        restaurant = RestaurantFactory()
        created = restaurant.created_at

        store.update(
            admin_caller,
            Restaurant,
            restaurant.pk,
            {"created_at": timezone.now() + timedelta(days=1)},
        )

        restaurant.refresh_from_db()
        assert restaurant.created_at == created

    def test_plain_user_update_denied(self, user_caller: Caller) -> None:
        restaurant = RestaurantFactory(name="Original")

        with pytest.raises(AccessDenied):
            store.update(user_caller, Restaurant, restaurant.pk, {"name": "Hijacked"})

        restaurant.refresh_from_db()
        assert restaurant.name == "Original"

    def test_denied_caller_learns_nothing_about_missing_rows(self, user_caller: Caller) -> None:
        with pytest.raises(AccessDenied):
            store.update(user_caller, Restaurant, uuid.uuid4(), {"name": "x"})

    def test_admin_missing_row_is_not_found(self, admin_caller: Caller) -> None:
        with pytest.raises(NotFound):
            store.update(admin_caller, Restaurant, uuid.uuid4(), {"name": "x"})

    def test_row_deleted_before_save_is_not_found(
        self, admin_caller: Caller, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        restaurant = RestaurantFactory(name="Original")
        authorize = store.authorize

        def authorize_then_delete(caller: Caller, row: Restaurant, operation: Operation) -> None:
            authorize(caller, row, operation)
            # Another admin deletes the row between the read and the save
            Restaurant._base_manager.filter(pk=row.pk).delete()

        monkeypatch.setattr(store, "authorize", authorize_then_delete)

        with pytest.raises(NotFound, match="Restaurant not found"):
            store.update(admin_caller, Restaurant, restaurant.pk, {"name": "Renamed"})

        assert not Restaurant._base_manager.filter(pk=restaurant.pk).exists()

    def test_bulk_update_stamps_updated_at(self) -> None:
        restaurant = RestaurantFactory()
        before = restaurant.updated_at

        Restaurant.objects.filter(pk=restaurant.pk).update(name="Bulk")

        restaurant.refresh_from_db()
        assert restaurant.updated_at > before


@pytest.mark.django_db
class TestDelete:
    """Deletes through the store."""

    def test_restaurant_delete_cascades(self, admin_caller: Caller) -> None:
        restaurant = RestaurantFactory()
        category = MenuCategoryFactory(restaurant=restaurant)
        MenuItemFactory(category=category)
        MenuItemFactory(category=category)

        deleted = store.delete(admin_caller, Restaurant, restaurant.pk)

        assert deleted["core.Restaurant"] == 1
        assert deleted["restaurant.MenuCategory"] == 1
        assert deleted["restaurant.MenuItem"] == 2
        assert not MenuItem.objects.filter(category__restaurant_id=restaurant.pk).exists()

    def test_category_delete_cascades_to_items(self, admin_caller: Caller) -> None:
        item = MenuItemFactory()

        store.delete(admin_caller, MenuCategory, item.category_id)

        assert not MenuItem.objects.filter(pk=item.pk).exists()

    def test_plain_user_delete_denied(self, user_caller: Caller) -> None:
        item = MenuItemFactory()

        with pytest.raises(AccessDenied):
            store.delete(user_caller, MenuItem, item.pk)

        assert MenuItem.objects.filter(pk=item.pk).exists()


@pytest.mark.django_db
class TestPizzaPalace:
    """End-to-end store behavior for a single restaurant."""

    @pytest.fixture
    def garlic_bread(self, admin_caller: Caller) -> MenuItem:
        restaurant = store.insert(
            admin_caller, Restaurant, {"name": "Pizza Palace", "slug": "pizza-palace"}
        )
        starters = store.insert(
            admin_caller, MenuCategory, {"restaurant_id": restaurant.pk, "name": "Starters"}
        )
        return store.insert(
            admin_caller,
            MenuItem,
            {"category_id": starters.pk, "name": "Garlic Bread", "price": Decimal("149.00")},
        )

    def test_item_update_moves_updated_at(
        self, admin_caller: Caller, garlic_bread: MenuItem
    ) -> None:
        before = garlic_bread.updated_at

        store.update(admin_caller, MenuItem, garlic_bread.pk, {"is_spicy": True})

        garlic_bread.refresh_from_db()
        assert garlic_bread.updated_at >= before
        assert garlic_bread.is_spicy is True

    def test_deleting_category_removes_item(
        self, admin_caller: Caller, anonymous: Caller, garlic_bread: MenuItem
    ) -> None:
        store.delete(admin_caller, MenuCategory, garlic_bread.category_id)

        with pytest.raises(NotFound):
            store.get(anonymous, MenuItem, garlic_bread.pk)
        with pytest.raises(NotFound):
            store.get(admin_caller, MenuItem, garlic_bread.pk)

    def test_deleting_restaurant_removes_scoped_grants(
        self, admin_caller: Caller, garlic_bread: MenuItem
    ) -> None:
        restaurant = garlic_bread.category.restaurant
        grant = UserRoleFactory(role=Role.MANAGER, restaurant=restaurant)

        store.delete(admin_caller, Restaurant, restaurant.pk)

        assert not UserRole.grants.filter(pk=grant.pk).exists()
        assert not MenuItem.objects.filter(pk=garlic_bread.pk).exists()
