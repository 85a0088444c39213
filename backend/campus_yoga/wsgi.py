"""
WSGI config for the campus yoga schedule project.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'campus_yoga.settings')

application = get_wsgi_application()
