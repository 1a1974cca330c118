from amaranth import *
from amaranth.lib.wiring import *
from amaranth.lib.data import Struct

from vcore import mux

# Condition flags as produced by the ALU. Bit 3 is Z, bit 0 is V.
class Flags(Struct):
    v: unsigned(1)
    c: unsigned(1)
    n: unsigned(1)
    z: unsigned(1)

class StatusRegister(Component):
    """Latches the ALU's condition flags.

    All four flags are replaced together when ``en`` is high; otherwise the
    register holds. Domain reset clears it.

    Attributes
    ----------
    en (input): capture ``flags_in`` on the next clock edge.
    flags_in (input): flags from the ALU.
    flags (output): latched flags.
    """
    en: In(1)
    flags_in: In(Flags)

    flags: Out(Flags)

    def elaborate(self, platform):
        m = Module()

        m.d.sync += self.flags.eq(mux(
            self.en,
            self.flags_in.as_value(),
            self.flags.as_value(),
        ))

        return m
