"""
Dashboard URL routes.
"""

from django.urls import path

from apps.web.media import views as media_views

from . import api, views

app_name = "dashboard"

urlpatterns = [
    path("", views.home, name="home"),
    path("login/", views.login_view, name="login"),
    path("logout/", views.logout_view, name="logout"),
    # JSON API
    path("api/me", views.me, name="me"),
    path("api/restaurants", api.restaurants, name="restaurants"),
    path("api/restaurants/<uuid:pk>", api.restaurant_detail, name="restaurant_detail"),
    path("api/categories", api.categories, name="categories"),
    path("api/categories/<uuid:pk>", api.category_detail, name="category_detail"),
    path("api/items", api.items, name="items"),
    path("api/items/<uuid:pk>", api.item_detail, name="item_detail"),
    path("api/roles", api.roles, name="roles"),
    path("api/roles/<uuid:pk>", api.role_detail, name="role_detail"),
    path("api/images", media_views.images, name="images"),
    path("api/images/<path:name>", media_views.image_detail, name="image_detail"),
]
