from amaranth import *
from amaranth.lib import wiring
from amaranth.lib.enum import Enum
from amaranth.lib.wiring import Out

class AlwaysReady(wiring.Signature):
    def __init__(self, payload_shape):
        super().__init__({
            'payload': Out(payload_shape),
            'valid': Out(1),
        })

# Builds a mux but out of AND and OR, which often generates cheaper logic on
# 4LUT devices.
def mux(select, one, zero):
    if isinstance(one, Enum):
        one = one.value
    if isinstance(one, int):
        one = Const(one)
    if isinstance(zero, Enum):
        zero = zero.value
    if isinstance(zero, int):
        zero = Const(zero)
    n = max(one.shape().width, zero.shape().width)
    select = select.any() # force to 1 bit
    return (
        (select.replicate(n) & one) | (~select.replicate(n) & zero)
    )

# Checks that an integer fits in an unsigned bus of the given width. Used at
# the Python boundary (models, harness) where ints are unbounded.
def check_width(name, value, width):
    if not isinstance(value, int) or value < 0 or value >> width:
        raise ValueError(
            f"{name} must be an unsigned {width}-bit value, got {value!r}")
    return value
