# Top level that puts the three state-holding units of the core side by side on
# one clock and reset. The units are not connected to each other; the control
# unit that sequences them and routes data between them is external.

from amaranth import *
from amaranth.lib.wiring import *

from vcore.ir import InstructionRegister, InstFields
from vcore.status import StatusRegister, Flags
from vcore.regfile import RegFile, VIDEO_MEM_END

class Datapath(Component):
    ir_en: In(1)
    ir_inst: In(16)
    ir_fields: Out(InstFields)

    sr_en: In(1)
    sr_flags_in: In(Flags)
    sr_flags: Out(Flags)

    rf_acc_en: In(1)
    rf_pc_en: In(1)
    rf_rpc_en: In(1)
    rf_reg_en: In(1)
    rf_reg_num: In(6)
    rf_din: In(16)
    rf_acc: Out(16)
    rf_pc: Out(16)
    rf_reg: Out(16)

    def __init__(self, *, pc_reset = VIDEO_MEM_END):
        super().__init__()

        self.ir = InstructionRegister()
        self.sr = StatusRegister()
        self.rf = RegFile(pc_reset = pc_reset)

    def elaborate(self, platform):
        m = Module()

        m.submodules.ir = ir = self.ir
        m.submodules.sr = sr = self.sr
        m.submodules.rf = rf = self.rf

        m.d.comb += [
            ir.en.eq(self.ir_en),
            ir.inst.eq(self.ir_inst),
            self.ir_fields.eq(ir.fields),

            sr.en.eq(self.sr_en),
            sr.flags_in.eq(self.sr_flags_in),
            self.sr_flags.eq(sr.flags),

            rf.acc_en.eq(self.rf_acc_en),
            rf.pc_en.eq(self.rf_pc_en),
            rf.rpc_en.eq(self.rf_rpc_en),
            rf.reg_en.eq(self.rf_reg_en),
            rf.reg_num.eq(self.rf_reg_num),
            rf.din.eq(self.rf_din),
            self.rf_acc.eq(rf.acc),
            self.rf_pc.eq(rf.pc),
            self.rf_reg.eq(rf.reg),
        ]

        return m
