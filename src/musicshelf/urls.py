"""
URL configuration for musicshelf project.
"""
from django.contrib import admin
from django.urls import path, include
from .views import HomeView

urlpatterns = [
    path('admin/', admin.site.urls),
    path('', HomeView.as_view(), name='home'),
    path('api/db/', include('library.urls')),
    path('api/shelves/', include('shelves.urls')),
]
