"""
API package containing the HTTP routes.

``router`` in ``router.py`` includes every domain router and is mounted
by ``main.create_app``.
"""
