from .context import *  # NOQA
from .converter import *  # NOQA
from .converters import *  # NOQA
from .descriptor import *  # NOQA
from .object_mapper import *  # NOQA
from .type_spec import *  # NOQA
