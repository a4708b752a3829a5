"""WSGI entry point serving the interlinking JSON endpoints.

Point the application server at ``interlink_dashboard.wsgi:application``.
Settings are read from the environment; see ``interlink_dashboard.settings``.
"""

import os

from django.core.wsgi import get_wsgi_application  # type: ignore

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'interlink_dashboard.settings')

application = get_wsgi_application()
