"""Hookroute HTTP gateway.

This package provides the Falcon Asynchronous Server Gateway Interface
(ASGI) application that receives GitHub webhook deliveries, classifies
them and forwards them to per-package notification endpoints.

Usage
-----
Create and run the application::

    from hookroute.gateway import create_app

    app = create_app()              # health-only mode
    app = create_app(dependencies)  # full gateway with POST /webhook

"""

from hookroute.gateway.app import AppDependencies, create_app

__all__ = ["AppDependencies", "create_app"]
