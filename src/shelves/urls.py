"""URL routes for the shelf JSON API."""

from django.urls import path

from . import views

app_name = "shelves"

urlpatterns = [
    path("", views.shelves_api, name="shelves-api"),
]
