from .in_memory_gateway import *  # NOQA
from .repository import *  # NOQA
