# Cycle-level reference models of the core's state-holding units.
#
# Each model's tick() is one clock edge: reset is evaluated first, then the
# enables, and otherwise state holds. The gateware is checked against these in
# simulation.

from vcore import check_width
from vcore.regfile import NREGS, ACC, RPC, PC, VIDEO_MEM_END

def decode(word):
    """Splits a 16-bit instruction word into (cond, op, updt, imm, val)."""
    check_width("instruction", word, 16)
    return (
        (word >> 12) & 0xF,
        (word >> 8) & 0xF,
        (word >> 7) & 0x1,
        (word >> 6) & 0x1,
        word & 0x3F,
    )

class InstructionRegisterModel:
    def __init__(self):
        self.fields = (0, 0, 0, 0, 0)

    def tick(self, reset, enable, instruction):
        check_width("instruction", instruction, 16)
        if reset:
            self.fields = (0, 0, 0, 0, 0)
        elif enable:
            self.fields = decode(instruction)
            cond, op, updt, imm, val = self.fields
            assert (cond << 12 | op << 8 | updt << 7 | imm << 6 | val) \
                    == instruction, \
                    f"fields {self.fields} do not partition {instruction:#06x}"
        return self.fields

class StatusRegisterModel:
    def __init__(self):
        self.flags = 0

    def tick(self, reset, enable, flags_in):
        check_width("flags", flags_in, 4)
        if reset:
            self.flags = 0
        elif enable:
            self.flags = flags_in
        return self.flags

class RegFileModel:
    """Reference model of the register file.

    ``registers`` is the full storage array; ``tick`` returns the three read
    ports (acc, pc, reg) as seen after the edge.
    """

    def __init__(self, *, pc_reset = VIDEO_MEM_END):
        check_width("pc_reset", pc_reset, 16)
        self.pc_reset = pc_reset
        self.registers = [0] * NREGS
        self.registers[PC] = pc_reset
        self.reg_number = 0

    def read(self, index):
        check_width("register number", index, 6)
        return self.registers[index]

    def outputs(self):
        return (
            self.registers[ACC],
            self.registers[PC],
            self.registers[self.reg_number],
        )

    def tick(self, reset = False, acc_enable = False, pc_enable = False,
             rpc_enable = False, reg_enable = False, reg_number = 0,
             data_in = 0):
        self.reg_number = check_width("register number", reg_number, 6)
        check_width("data", data_in, 16)

        if reset:
            self.registers = [0] * NREGS
            self.registers[PC] = self.pc_reset
            return self.outputs()

        if acc_enable:
            target = ACC
        elif pc_enable:
            target = PC
        elif rpc_enable:
            target = RPC
        elif reg_enable:
            target = reg_number
        else:
            target = None

        before = list(self.registers)
        if target is not None:
            self.registers[target] = data_in

        changed = [i for i in range(NREGS)
                   if before[i] != self.registers[i]]
        assert len(changed) <= 1, \
                f"more than one register changed in one tick: {changed}"

        return self.outputs()
