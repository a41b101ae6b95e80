from .analysis import find_chimera
from .utils import FormatError, StaleSpanError

__version__ = "0.1.0"
