"""Pytest configuration shared across test modules."""

import os

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "interlink_dashboard.settings")
os.environ.setdefault("DJANGO_SECRET_KEY", "test-secret")
os.environ.setdefault("DJANGO_DEBUG", "true")

# Tests run against the built-in engine weights and never reach the content API.
os.environ.pop("INTERLINKING_CONFIG_PATH", None)
os.environ["WEBFLOW_API_TOKEN"] = ""
