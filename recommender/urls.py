"""URL configuration for the recommender app.

This module defines the URL patterns for the interlinking endpoints. It also
specifies the ``app_name`` to allow namespacing from the project URL
configuration.
"""

from django.urls import path

from . import views

app_name = 'recommender'

urlpatterns = [
    path('analyze/', views.analyze_interlinking, name='analyze'),
    path('insert/', views.insert_links, name='insert'),
]
