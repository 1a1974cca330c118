# 16-bit x 64 register file with dedicated accumulator, PC and RPC ports.
#
# The accumulator, return PC and PC are ordinary entries in the same storage
# array; their dedicated ports are just fixed addresses. Every write, whichever
# port requested it, goes through one arbitrated write command, so at most one
# word can change per cycle.

from amaranth import *
from amaranth.lib.wiring import *
from amaranth.lib.enum import *

from vcore import AlwaysReady

NREGS = 64

ACC = 0
RPC = 62
PC = 63

# Addresses below this are video memory. The PC comes out of reset here so the
# first fetch lands in program space.
VIDEO_MEM_END = 0xA000

REG_NAMES = ["acc"] + [f"r{i}" for i in range(1, RPC)] + ["rpc", "pc"]

# Which request won arbitration. Listed in priority order.
class WriteSel(Enum, shape = unsigned(2)):
    ACC = 0
    PC = 1
    RPC = 2
    REG = 3

def RegWrite(addrbits = 6):
    return Signature({
        'sel': Out(WriteSel),
        'reg': Out(addrbits),
        'value': Out(16),
    })

# Record of the last write committed to storage. `order` counts committed
# writes, so it changes exactly once per write; see trace_writes in vcore.sim.
def RegRetire(addrbits = 6):
    return Signature({
        'order': Out(32),
        'sel': Out(WriteSel),
        'reg': Out(addrbits),
        'value': Out(16),
    })

class RegFile(Component):
    """The register file.

    Reads are combinational: ``acc``, ``pc`` and ``reg`` always show the
    current contents of their words. Writes take effect on the clock edge.

    If more than one write enable is asserted in a cycle, exactly one wins, in
    the order acc_en, pc_en, rpc_en, reg_en. The others are dropped. Writing
    through ``reg_en`` with ``reg_num`` of 0, 62 or 63 hits the accumulator,
    RPC or PC respectively.

    Domain reset zeroes every word except the PC, which is set to
    ``pc_reset``.

    Parameters
    ----------
    pc_reset (integer): PC value after reset. Defaults to VIDEO_MEM_END.

    Attributes
    ----------
    acc_en (input): write ``din`` to the accumulator.
    pc_en (input): write ``din`` to the PC.
    rpc_en (input): write ``din`` to the return PC.
    reg_en (input): write ``din`` to register ``reg_num``.
    reg_num (input): general register address, for both read and write.
    din (input): write data.
    acc (output): accumulator contents.
    pc (output): PC contents.
    reg (output): contents of register ``reg_num``.
    write (output): the write command that won arbitration this cycle, if
        any. For tracing; nothing inside the register file reads it back.
    retired (output): the last write committed on a clock edge, held until the
        next one. Not cleared by reset.
    """
    acc_en: In(1)
    pc_en: In(1)
    rpc_en: In(1)
    reg_en: In(1)
    reg_num: In(6)
    din: In(16)

    acc: Out(16)
    pc: Out(16)
    reg: Out(16)

    write: Out(AlwaysReady(RegWrite()))
    retired: Out(RegRetire())

    def __init__(self, *, pc_reset = VIDEO_MEM_END):
        super().__init__()

        if pc_reset < 0 or pc_reset >> 16:
            raise ValueError(f"pc_reset does not fit in 16 bits: {pc_reset:#x}")

        self.pc_reset = pc_reset

        self.regs = Array(
            Signal(16, name = REG_NAMES[i],
                   init = pc_reset if i == PC else 0)
            for i in range(NREGS)
        )

    def elaborate(self, platform):
        m = Module()

        cmd = self.write.payload

        # Arbitration.
        with m.If(self.acc_en):
            m.d.comb += [
                cmd.sel.eq(WriteSel.ACC),
                cmd.reg.eq(ACC),
            ]
        with m.Elif(self.pc_en):
            m.d.comb += [
                cmd.sel.eq(WriteSel.PC),
                cmd.reg.eq(PC),
            ]
        with m.Elif(self.rpc_en):
            m.d.comb += [
                cmd.sel.eq(WriteSel.RPC),
                cmd.reg.eq(RPC),
            ]
        with m.Else():
            m.d.comb += [
                cmd.sel.eq(WriteSel.REG),
                cmd.reg.eq(self.reg_num),
            ]

        m.d.comb += [
            cmd.value.eq(self.din),
            self.write.valid.eq(
                self.acc_en | self.pc_en | self.rpc_en | self.reg_en
            ),
        ]

        # The one and only write path into storage.
        with m.If(self.write.valid):
            m.d.sync += self.regs[cmd.reg].eq(cmd.value)

        # Reset-less so a record survives a reset asserted right after the edge
        # that produced it. No write is committed on an edge held in reset.
        order = Signal(32, reset_less = True)
        sel = Signal(WriteSel, reset_less = True)
        reg = Signal(6, reset_less = True)
        value = Signal(16, reset_less = True)
        with m.If(self.write.valid & ~ResetSignal()):
            m.d.sync += [
                order.eq(order + 1),
                sel.eq(cmd.sel),
                reg.eq(cmd.reg),
                value.eq(cmd.value),
            ]

        m.d.comb += [
            self.retired.order.eq(order),
            self.retired.sel.eq(sel),
            self.retired.reg.eq(reg),
            self.retired.value.eq(value),
        ]

        m.d.comb += [
            self.acc.eq(self.regs[ACC]),
            self.pc.eq(self.regs[PC]),
            self.reg.eq(self.regs[self.reg_num]),
        ]

        return m
