"""WSGI entrypoint used by Passenger and other WSGI hosts."""

from appgallery.backend.app import create_app

application = create_app()
