from django.apps import AppConfig


class RecommenderConfig(AppConfig):
    """Configuration for the interlinking recommender Django app."""

    name = 'recommender'
