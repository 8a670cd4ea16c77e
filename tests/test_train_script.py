import io

from sokoban_core.game import Game
from qlearning.config import RunConfig
from scripts.train_qlearning import main, run

LVL = "#####\n#.$.#\n#.&.#\n#.*.#\n#####"


def test_run_quiet_then_show():
    out, err = io.StringIO(), io.StringIO()
    g = Game.from_string(LVL)
    q = run(g, RunConfig(seed=1, sleep_ms=0, quiet=50, print_q_exit=True), steps=3, out=out, err=err)
    assert len(q) > 0
    text = out.getvalue()
    assert "[INFO] Seed: 1" in text
    assert text.count("Time: ") == 3
    assert "State: 0x" in text
    assert "Up" in err.getvalue()


def test_main_with_file(tmp_path, capsys):
    p = tmp_path / "m.txt"
    p.write_text(LVL, encoding="utf-8")
    rc = main(["--maze", str(p), "--quiet", "20", "--steps", "2", "--sleep", "0", "--seed", "3", "--alpha", "0.9"])
    assert rc == 0
    assert "Time: " in capsys.readouterr().out


def test_main_reports_bad_maze(tmp_path, capsys):
    p = tmp_path / "m.txt"
    p.write_text("#&$#", encoding="utf-8")
    rc = main(["--maze", str(p), "--steps", "1", "--sleep", "0"])
    assert rc == 1
    assert "Error: No Player" in capsys.readouterr().err


def test_main_reports_badly_typed_config(tmp_path, capsys):
    p = tmp_path / "m.txt"
    p.write_text(LVL, encoding="utf-8")
    c = tmp_path / "c.yaml"
    c.write_text('run:\n  state_bits: "many"\n', encoding="utf-8")
    rc = main(["--maze", str(p), "--config", str(c), "--steps", "1", "--sleep", "0"])
    assert rc == 1
    assert "Error: run.state_bits" in capsys.readouterr().err
