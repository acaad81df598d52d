from .party import *
from .admin import *
