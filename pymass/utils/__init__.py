from .log import configure_logging, get_logger
from .math import is_symmetric, solve_upper, upper_cholesky
from .misc import string_diag
