import io

import pytest

from rollexp.cli import main


def test_single_expression(capsys):
    assert main(["--mode", "max", "1d6"]) == 0
    assert capsys.readouterr().out == "6.00000"


def test_expression_words_are_joined(capsys):
    assert main(["-m", "max", "1d6", "+", "2"]) == 0
    assert capsys.readouterr().out == "8.00000"


def test_explain(capsys):
    assert main(["-m", "max", "-e", "2d6"]) == 0
    assert capsys.readouterr().out == "12.00000 : [6, 6]"


def test_amount(capsys):
    assert main(["-m", "max", "-n", "3", "1d6"]) == 0
    assert capsys.readouterr().out.split("\n") == ["6.00000"] * 3


def test_seed_is_reproducible(capsys):
    main(["--seed", "5", "-e", "10d20"])
    first = capsys.readouterr().out
    main(["--seed", "5", "-e", "10d20"])
    assert capsys.readouterr().out == first


def test_source_file(tmp_path, capsys):
    source = tmp_path / "exps.txt"
    source.write_text("1d4\n\n2\n", encoding="utf-8")
    assert main(["-m", "min", "-s", str(source)]) == 0
    assert capsys.readouterr().out == "1.00000\n2.00000"


def test_stdin(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("3\n4*2\n"))
    assert main([]) == 0
    assert capsys.readouterr().out == "3.00000\n8.00000"


def test_destination_file(tmp_path, capsys):
    destination = tmp_path / "out.txt"
    assert main(["-m", "max", "-d", str(destination), "1d8"]) == 0
    assert destination.read_text(encoding="utf-8") == "8.00000"
    assert capsys.readouterr().out == ""


def test_config_file(tmp_path, capsys):
    config = tmp_path / "rollexp.ini"
    config.write_text("[rollexp]\nroll_mode = min\nresult_precision = 2\n", encoding="utf-8")
    assert main(["--config", str(config), "2d6"]) == 0
    assert capsys.readouterr().out == "2.00"
    assert main(["--config", str(config), "-m", "max", "2d6"]) == 0
    assert capsys.readouterr().out == "12.00"


def test_error_exit_code(capsys):
    assert main(["1d"]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "parse error: expected sides, found end of input" in captured.err


def test_eval_error(capsys):
    assert main(["2d6kh3"]) == 1
    assert "eval error: amount 3 is out of range [0, 2]" in capsys.readouterr().err


def test_quiet_hides_errors(capsys):
    assert main(["-q", "1d"]) == 1
    assert capsys.readouterr().err == ""


def test_missing_source(tmp_path, capsys):
    assert main(["-s", str(tmp_path / "missing.txt")]) == 1
    assert "error:" in capsys.readouterr().err


def test_verbose_logs_tokens(capsys):
    assert main(["-v", "-m", "max", "1d6"]) == 0
    captured = capsys.readouterr()
    assert captured.out == "6.00000"
    assert "[DEBUG]" in captured.err
    assert "tokens" in captured.err


@pytest.mark.parametrize("argv", [
    ["-v", "-q", "1d6"],
    ["-n", "2", "-s", "exps.txt", "1d6"],
    ["-n", "0", "1d6"],
    ["-n", "2"],
    ["-m", "foo", "1d6"],
])
def test_invalid_arguments(argv, capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    assert exc_info.value.code == 2
