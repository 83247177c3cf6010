"""API routers, one module per resource."""

from stockroom.api.routes import alerts, locations, notifications, products, requests, serials

ROUTERS = [
    requests.router,
    serials.router,
    products.router,
    locations.router,
    notifications.router,
    alerts.router,
]

__all__ = ["ROUTERS"]
