# Simulation harness for the core's units.
#
# Each unit is wrapped in a top module that owns the sync domain (with an
# asynchronous reset, the way the core is meant to be clocked), and the
# tick_* helpers drive one clock edge at a time with the same calling
# convention and return values as the reference models in vcore.model.

from amaranth import *
from amaranth.sim import Simulator

from vcore import check_width
from vcore.regfile import REG_NAMES, WriteSel

class Harness:
    """Wraps ``dut`` in a top module with a ``sync`` domain and a simulator
    clocked at 1 MHz.

    Attributes
    ----------
    dut: the unit under test.
    cd (ClockDomain): the sync domain; testbenches assert ``cd.rst`` to reset.
    sim (Simulator): the simulator, if you need to add more processes.
    """
    def __init__(self, dut, *, async_reset = True):
        self.dut = dut

        self.m = Module()
        self.m.domains.sync = self.cd = ClockDomain("sync",
                                                    async_reset = async_reset)
        self.m.submodules.dut = dut

        self.sim = Simulator(self.m)
        self.sim.add_clock(1e-6)

    def run(self, *testbenches, background = (), vcd = None, traces = ()):
        for tb in testbenches:
            self.sim.add_testbench(tb)
        for tb in background:
            self.sim.add_testbench(tb, background = True)

        if vcd is not None:
            with self.sim.write_vcd(vcd_file = vcd, traces = traces):
                self.sim.run()
        else:
            self.sim.run()

async def reset(ctx, harness):
    ctx.set(harness.cd.rst, 1)
    await ctx.tick()
    ctx.set(harness.cd.rst, 0)

async def tick_ir(ctx, harness, *, reset = False, enable = False,
                  instruction = 0):
    """One clock edge of an InstructionRegister. Returns
    (cond, op, updt, imm, val) as latched after the edge."""
    dut = harness.dut
    check_width("instruction", instruction, 16)

    ctx.set(harness.cd.rst, reset)
    ctx.set(dut.en, enable)
    ctx.set(dut.inst, instruction)
    await ctx.tick()
    ctx.set(harness.cd.rst, 0)

    return (
        ctx.get(dut.fields.cond),
        ctx.get(dut.fields.op),
        ctx.get(dut.fields.updt),
        ctx.get(dut.fields.imm),
        ctx.get(dut.fields.val),
    )

async def tick_sr(ctx, harness, *, reset = False, enable = False,
                  flags_in = 0):
    """One clock edge of a StatusRegister. Returns the latched flags as a
    4-bit integer, Z in bit 3 down to V in bit 0."""
    dut = harness.dut
    check_width("flags", flags_in, 4)

    ctx.set(harness.cd.rst, reset)
    ctx.set(dut.en, enable)
    ctx.set(dut.flags_in.as_value(), flags_in)
    await ctx.tick()
    ctx.set(harness.cd.rst, 0)

    return ctx.get(dut.flags.as_value())

async def tick_rf(ctx, harness, *, reset = False, acc_enable = False,
                  pc_enable = False, rpc_enable = False, reg_enable = False,
                  reg_number = 0, data_in = 0):
    """One clock edge of a RegFile. Returns (acc, pc, reg) after the edge."""
    dut = harness.dut
    check_width("register number", reg_number, 6)
    check_width("data", data_in, 16)

    ctx.set(harness.cd.rst, reset)
    ctx.set(dut.acc_en, acc_enable)
    ctx.set(dut.pc_en, pc_enable)
    ctx.set(dut.rpc_en, rpc_enable)
    ctx.set(dut.reg_en, reg_enable)
    ctx.set(dut.reg_num, reg_number)
    ctx.set(dut.din, data_in)
    await ctx.tick()
    ctx.set(harness.cd.rst, 0)

    return (ctx.get(dut.acc), ctx.get(dut.pc), ctx.get(dut.reg))

async def read_reg(ctx, rf, index):
    """Reads a register through the general read port, with all write enables
    dropped so nothing changes on the next edge."""
    check_width("register number", index, 6)
    ctx.set(rf.acc_en, 0)
    ctx.set(rf.pc_en, 0)
    ctx.set(rf.rpc_en, 0)
    ctx.set(rf.reg_en, 0)
    ctx.set(rf.reg_num, index)
    return ctx.get(rf.reg)

async def read_all_regs(ctx, rf):
    return [(await read_reg(ctx, rf, i)) for i in range(len(REG_NAMES))]

def format_write(sel, reg, value):
    return f"R[{reg:02x}]<={value:04x} ({WriteSel(sel).name.lower()}) " \
           f"{REG_NAMES[reg]}"

async def trace_writes(ctx, rf, log):
    """Background testbench: appends one line to ``log`` for every write the
    register file commits.

    Follows the register file's retire record rather than sampling the write
    command at clock edges, so a reset asserted at any point does not disturb
    it. The record of a write appears just after the edge that commits it; run
    at least one more edge before ending the simulation to see the last one.
    """
    rec = rf.retired
    while True:
        await ctx.changed(rec.order)
        log.append(format_write(ctx.get(rec.sel.as_value()), ctx.get(rec.reg),
                                ctx.get(rec.value)))
