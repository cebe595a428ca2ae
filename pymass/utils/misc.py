import numpy as np


def string_diag(d, n_chars: int = 32) -> str:
    """Format the diagonal `d` on at most `n_chars` characters

    Longer strings are cut and terminated by " ..."
    """
    s_diag = np.array2string(np.asarray(d), separator=", ")
    s_dots = " ..."
    n_diag_chars = n_chars - len(s_dots)
    if len(s_diag) > n_diag_chars:
        return s_diag[:n_diag_chars] + s_dots
    return s_diag
