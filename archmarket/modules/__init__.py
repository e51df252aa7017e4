"""
Application modules, one package per resource.
"""

from .blog import BlogController
from .custom_requests import CustomRequestsController
from .designs import DesignsController
from .health import HealthController
from .orders import OrdersController
from .reviews import ReviewsController

CONTROLLERS = [
    HealthController,
    DesignsController,
    OrdersController,
    ReviewsController,
    BlogController,
    CustomRequestsController,
]

__all__ = [
    "CONTROLLERS",
    "BlogController",
    "CustomRequestsController",
    "DesignsController",
    "HealthController",
    "OrdersController",
    "ReviewsController",
]
