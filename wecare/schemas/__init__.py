# Schemas package (re-export feature modules for stable imports)
from .common.common import *
from .users.profile import *
from .auth.auth import *
from .nurses.nurse import *
from .appointments.appointment import *
