import pytest

from vcore.model import (decode, InstructionRegisterModel, StatusRegisterModel,
                         RegFileModel)
from vcore.regfile import ACC, RPC, PC, NREGS, VIDEO_MEM_END

def test_decode_every_word():
    for word in range(1 << 16):
        cond, op, updt, imm, val = decode(word)
        assert cond == (word & 0xF000) >> 12
        assert op == (word & 0x0F00) >> 8
        assert updt == (word & 0x0080) >> 7
        assert imm == (word & 0x0040) >> 6
        assert val == word & 0x003F

@pytest.mark.parametrize("word", [-1, 0x10000])
def test_decode_rejects_wide_words(word):
    with pytest.raises(ValueError):
        decode(word)

def test_ir_model():
    ir = InstructionRegisterModel()
    assert ir.fields == (0, 0, 0, 0, 0)
    assert ir.tick(False, True, 0xF1C5) == decode(0xF1C5)
    assert ir.tick(False, False, 0x0000) == decode(0xF1C5)
    assert ir.tick(True, True, 0xFFFF) == (0, 0, 0, 0, 0)

def test_status_model():
    sr = StatusRegisterModel()
    assert sr.tick(False, True, 0b1100) == 0b1100
    assert sr.tick(False, False, 0b0011) == 0b1100
    assert sr.tick(True, True, 0b1111) == 0
    with pytest.raises(ValueError):
        sr.tick(False, True, 0b10000)

def test_regfile_model_reset_state():
    rf = RegFileModel()
    assert rf.registers == [VIDEO_MEM_END if i == PC else 0
                            for i in range(NREGS)]
    rf.tick(rpc_enable = True, data_in = 0x1111)
    rf.tick(reset = True)
    assert rf.read(RPC) == 0
    assert rf.read(PC) == VIDEO_MEM_END

def test_regfile_model_scenario():
    rf = RegFileModel()
    rf.tick(reset = True)
    assert rf.tick(reg_enable = True, reg_number = 5,
                   data_in = 0x1234) == (0, VIDEO_MEM_END, 0x1234)
    acc, pc, reg = rf.tick(pc_enable = True, reg_enable = True, reg_number = 5,
                           data_in = 0xB000)
    assert (acc, pc, reg) == (0, 0xB000, 0x1234)

def test_regfile_model_priority_and_aliasing():
    rf = RegFileModel()
    rf.tick(acc_enable = True, pc_enable = True, rpc_enable = True,
            reg_enable = True, reg_number = 9, data_in = 0x0AAA)
    assert rf.read(ACC) == 0x0AAA
    assert rf.read(9) == 0
    rf.tick(reg_enable = True, reg_number = PC, data_in = 0x0123)
    assert rf.read(PC) == 0x0123

def test_regfile_model_rejects_wide_inputs():
    rf = RegFileModel()
    with pytest.raises(ValueError):
        rf.tick(reg_enable = True, reg_number = 64)
    with pytest.raises(ValueError):
        rf.tick(acc_enable = True, data_in = 0x10000)
    with pytest.raises(ValueError):
        RegFileModel(pc_reset = 0x10000)
