import pytest

from minesolver.cli import build_parser, main


def test_single_native_run_prints_board_and_result(capsys):
    assert main(["beginner", "--native", "--seed", "3", "--no-color"]) == 0

    out = capsys.readouterr().out.splitlines()
    assert len(out) == 10 + 2
    assert out[10] == ""
    assert out[11].startswith("Solved: ")
    assert ", luck: " in out[11]


def test_single_scripted_run(capsys):
    assert main(["intermediate", "--seed", "1", "--no-color"]) == 0

    assert "Solved: " in capsys.readouterr().out


def test_batch_run_prints_summary(capsys):
    assert main(["beginner", "-n", "-i", "3", "--seed", "0"]) == 0

    out = capsys.readouterr().out
    assert out.startswith("Solved ")
    assert "/3 successful (" in out
    assert ", Beginner, avg luck " in out


# 3x1 field with its only mine at (2,0); deduction alone always clears it
TINY_FIELD_SCRIPT = (
    "class ExplosionException(Exception):\n"
    "    pass\n"
    "\n"
    "class MineField:\n"
    "    def __init__(self, width, height, number_of_mines):\n"
    "        self.mines = {(2, 0)}\n"
    "\n"
    "    def sweep_cell(self, column, row):\n"
    "        if (column, row) in self.mines:\n"
    "            raise ExplosionException()\n"
    "        return 1 if column == 1 else 0\n"
    "\n"
    "BEGINNER_FIELD = {'width': 3, 'height': 1, 'number_of_mines': 1}\n"
)


@pytest.fixture
def tiny_script(tmp_path):
    script = tmp_path / "tiny_field.py"
    script.write_text(TINY_FIELD_SCRIPT)
    return str(script)


def test_custom_script(tiny_script, capsys):
    assert main(["beginner", "--script", tiny_script, "--no-color"]) == 0

    out = capsys.readouterr().out
    assert out.splitlines()[0] == "  1 F"
    assert "Solved: True, luck: 1.0" in out


def test_batch_run_uses_custom_script(tiny_script, capsys):
    assert main(["beginner", "--script", tiny_script, "-i", "5"]) == 0

    captured = capsys.readouterr()
    assert captured.out.strip() == "Solved 5/5 successful (1.0), Beginner, avg luck 1.0"
    assert captured.err == ""


def test_broken_script_reports_error(tmp_path, capsys):
    script = tmp_path / "broken_field.py"
    script.write_text("raise RuntimeError('no field today')\n")

    assert main(["beginner", "--script", str(script)]) == 1

    assert "error:" in capsys.readouterr().err


def test_unknown_mode_is_a_usage_error():
    with pytest.raises(SystemExit) as excinfo:
        main(["nightmare"])
    assert excinfo.value.code == 2


def test_iterations_must_be_positive():
    with pytest.raises(SystemExit):
        main(["expert", "-i", "0"])


def test_parser_defaults():
    args = build_parser().parse_args(["expert"])

    assert args.mode == "expert"
    assert args.iterations is None
    assert not args.native
    assert args.seed is None
    assert args.verbose == 0
