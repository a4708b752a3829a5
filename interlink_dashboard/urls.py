"""Root URL configuration for the interlink dashboard project."""

from django.urls import include, path

urlpatterns = [
    path('interlinking/', include('recommender.urls')),
]
