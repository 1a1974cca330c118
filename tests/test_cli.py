import pytest

from vcore.cli import main, UNITS

@pytest.mark.parametrize("unit", list(UNITS))
def test_generate_rtlil(unit, capsys):
    assert main(["generate", unit, "--format", "rtlil"]) == 0
    out = capsys.readouterr().out
    assert "module \\top" in out

def test_generate_verilog_to_file(tmp_path):
    path = tmp_path / "regfile.v"
    assert main(["generate", "regfile", "--name", "regfile",
                 "-o", str(path)]) == 0
    assert "module regfile" in path.read_text()

def test_simulate(capsys):
    assert main(["simulate", "--trace"]) == 0
    out = capsys.readouterr().out
    assert "FAIL" not in out
    assert "regfile pc beats reg ... PASS" in out
    assert "R[05]<=1234 (reg) r5" in out
    assert "R[3f]<=b000 (pc) pc" in out

def test_simulate_writes_waveforms(tmp_path):
    assert main(["simulate", "--vcd", str(tmp_path)]) == 0
    for unit in ["ir", "status", "regfile"]:
        assert (tmp_path / f"{unit}.vcd").exists()

def test_simulate_does_not_report_setup_errors_as_failures(monkeypatch, capsys):
    import vcore.cli

    real = vcore.cli.regfile_scenario

    def broken(pc_reset):
        h, process = real(pc_reset)
        # Not an async function, so the simulator refuses it.
        return h, lambda ctx: process(ctx)

    monkeypatch.setattr(vcore.cli, "regfile_scenario", broken)
    with pytest.raises(TypeError):
        main(["simulate"])
    assert "FAIL" not in capsys.readouterr().out
