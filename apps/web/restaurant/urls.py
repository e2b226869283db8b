"""
URL routing for the public menu API.

All endpoints are public (no auth required) and CORS-enabled.
"""

from django.urls import path

from apps.web.restaurant import views

app_name = "restaurant"

urlpatterns = [
    path("restaurants", views.restaurant_list, name="restaurant_list"),
    path("restaurants/<slug:slug>", views.restaurant_menu, name="restaurant_menu"),
]
