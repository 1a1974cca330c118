# Instruction register: latches a fetched instruction word and breaks it into
# control fields.
#
# Instruction word layout:
#
#   15   12 11    8   7      6     5     0
#  +-------+-------+------+-----+--------+
#  | cond  |  op   | updt | imm |  val   |
#  +-------+-------+------+-----+--------+

from amaranth import *
from amaranth.lib.wiring import *
from amaranth.lib.data import Struct

class InstFields(Struct):
    # Declared LSB first. The decode below does not depend on this ordering;
    # every field is sliced out of the word explicitly.
    val: unsigned(6)
    imm: unsigned(1)
    updt: unsigned(1)
    op: unsigned(4)
    cond: unsigned(4)

class InstructionRegister(Component):
    """The InstructionRegister holds the most recently latched instruction,
    pre-decoded into its fields.

    The outputs are registered: they reflect the last word latched while
    ``en`` was high, not the word currently presented on ``inst``. Domain
    reset clears every field to zero.

    Attributes
    ----------
    en (input): latch ``inst`` on the next clock edge.
    inst (input): instruction word from the fetch path.
    fields (output): decoded fields, see InstFields.
    """
    en: In(1)
    inst: In(16)

    fields: Out(InstFields)

    def elaborate(self, platform):
        m = Module()

        with m.If(self.en):
            m.d.sync += [
                self.fields.cond.eq(self.inst[12:16]),
                self.fields.op.eq(self.inst[8:12]),
                self.fields.updt.eq(self.inst[7]),
                self.fields.imm.eq(self.inst[6]),
                self.fields.val.eq(self.inst[0:6]),
            ]

        return m
