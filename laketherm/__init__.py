"""laketherm solves the heat budget of lake columns made of snow, lake water and sediment, including freezing, melting and convective mixing."""

import faulthandler
from importlib.metadata import version

__version__: str = version("laketherm")

if __debug__:
    import numba

    # By default, instead of causing an IndexError, accessing an out-of-bound index
    # of an array in a Numba-compiled function will return invalid values or lead
    # to an access violation error (it's reading from invalid memory locations).
    # Setting BOUNDSCHECK to 1 will enable bounds checking for all array accesses
    numba.config.BOUNDSCHECK = 1

faulthandler.enable()
