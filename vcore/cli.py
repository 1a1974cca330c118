import argparse
import sys
from pathlib import Path

from amaranth.back import rtlil, verilog

from vcore.datapath import Datapath
from vcore.ir import InstructionRegister
from vcore.model import decode
from vcore.regfile import RegFile, REG_NAMES, PC, VIDEO_MEM_END
from vcore.sim import (Harness, reset, tick_ir, tick_sr, tick_rf, read_reg,
                       read_all_regs, trace_writes)
from vcore.status import StatusRegister

UNITS = {
    'ir': lambda args: InstructionRegister(),
    'status': lambda args: StatusRegister(),
    'regfile': lambda args: RegFile(pc_reset = args.pc_reset),
    'datapath': lambda args: Datapath(pc_reset = args.pc_reset),
}

def generate(args):
    dut = UNITS[args.unit](args)
    if args.format == 'verilog':
        src = verilog.convert(dut, name = args.name)
    else:
        src = rtlil.convert(dut, name = args.name)

    if args.output is None:
        sys.stdout.write(src)
    else:
        Path(args.output).write_text(src)
    return 0

# Raised when a scenario's checks fail, as opposed to the simulation itself
# failing to start or run.
class ScenarioFailed(Exception):
    pass

async def check(name, case):
    print(f"{name} ... ", end='')
    try:
        await case()
    except Exception as e:
        raise ScenarioFailed(
            f"test case {name} failed due to above exception") from e
    print("PASS")

def expect(what, actual, expected):
    assert actual == expected, \
            f"{what} should be 0x{expected:x} but is 0x{actual:x}"

def regfile_scenario(pc_reset):
    uut = RegFile(pc_reset = pc_reset)
    h = Harness(uut)

    async def process(ctx):
        async def reset_state():
            await reset(ctx, h)
            values = await read_all_regs(ctx, uut)
            for i, v in enumerate(values):
                expect(REG_NAMES[i], v, pc_reset if i == PC else 0)

        async def general_write():
            before = await read_all_regs(ctx, uut)
            await tick_rf(ctx, h, reg_enable = True, reg_number = 5,
                          data_in = 0x1234)
            after = await read_all_regs(ctx, uut)
            for i in range(len(after)):
                expect(REG_NAMES[i], after[i],
                       0x1234 if i == 5 else before[i])

        async def pc_priority():
            _, pc, _ = await tick_rf(ctx, h, pc_enable = True,
                                     reg_enable = True, reg_number = 5,
                                     data_in = 0xB000)
            expect("pc", pc, 0xB000)
            expect("r5", await read_reg(ctx, uut, 5), 0x1234)

        await check("regfile reset state", reset_state)
        await check("regfile general write", general_write)
        await check("regfile pc beats reg", pc_priority)

        # One idle edge so a tracer sees the last write's retire record.
        await tick_rf(ctx, h, reg_number = 5)

    return h, process

def ir_scenario():
    uut = InstructionRegister()
    h = Harness(uut)

    async def process(ctx):
        async def latch():
            await reset(ctx, h)
            fields = await tick_ir(ctx, h, enable = True, instruction = 0xF1C5)
            assert fields == decode(0xF1C5), \
                    f"fields should be {decode(0xF1C5)} but are {fields}"

        async def hold():
            fields = await tick_ir(ctx, h, enable = False, instruction = 0x0000)
            assert fields == decode(0xF1C5), \
                    f"fields changed on a disabled tick: {fields}"

        await check("ir latch", latch)
        await check("ir hold", hold)

    return h, process

def status_scenario():
    uut = StatusRegister()
    h = Harness(uut)

    async def process(ctx):
        async def latch():
            await reset(ctx, h)
            expect("flags", await tick_sr(ctx, h, enable = True,
                                          flags_in = 0b1010), 0b1010)
            expect("flags", await tick_sr(ctx, h, enable = False,
                                          flags_in = 0b0101), 0b1010)
            expect("flags", await tick_sr(ctx, h, reset = True, enable = True,
                                          flags_in = 0b1111), 0)

        await check("status latch", latch)

    return h, process

def simulate(args):
    scenarios = {
        'ir': ir_scenario(),
        'status': status_scenario(),
        'regfile': regfile_scenario(args.pc_reset),
    }

    for unit, (h, process) in scenarios.items():
        background = []
        log = []
        if args.trace and unit == 'regfile':
            async def tracer(ctx, rf = h.dut, log = log):
                await trace_writes(ctx, rf, log)
            background.append(tracer)

        vcd = None
        if args.vcd is not None:
            Path(args.vcd).mkdir(parents = True, exist_ok = True)
            vcd = str(Path(args.vcd) / f"{unit}.vcd")

        try:
            h.run(process, background = background, vcd = vcd)
        except ScenarioFailed as e:
            print("FAIL")
            print(e, file = sys.stderr)
            if e.__cause__ is not None:
                print(e.__cause__, file = sys.stderr)
            return 1

        for line in log:
            print(line)

    return 0

def main(argv = None):
    parser = argparse.ArgumentParser(
        prog = "vcore",
        description = "Tools for the 16-bit core's register and decode units",
    )
    sub = parser.add_subparsers(dest = 'command', required = True)

    gen = sub.add_parser('generate', help = 'convert a unit to HDL')
    gen.add_argument('unit', choices = UNITS.keys())
    gen.add_argument('--format', choices = ['verilog', 'rtlil'],
                     default = 'verilog')
    gen.add_argument('--name', default = 'top', help = 'top module name')
    gen.add_argument('-o', '--output', help = 'output file (default stdout)')
    gen.add_argument('--pc-reset', type = lambda s: int(s, 0),
                     default = VIDEO_MEM_END,
                     help = 'PC value after reset (default 0xA000)')
    gen.set_defaults(func = generate)

    simp = sub.add_parser('simulate', help = 'run the built-in scenarios')
    simp.add_argument('--vcd', help = 'directory to write waveforms into')
    simp.add_argument('--trace', action = 'store_true',
                      help = 'print register file writes')
    simp.add_argument('--pc-reset', type = lambda s: int(s, 0),
                      default = VIDEO_MEM_END,
                      help = 'PC value after reset (default 0xA000)')
    simp.set_defaults(func = simulate)

    args = parser.parse_args(argv)
    return args.func(args)

if __name__ == "__main__":
    sys.exit(main())
