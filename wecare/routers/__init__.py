# Routers package
from . import auth_router
from . import profile_router
from . import nurses_router
from . import appointments_router

__all__ = [
    "auth_router",
    "profile_router",
    "nurses_router",
    "appointments_router",
]
