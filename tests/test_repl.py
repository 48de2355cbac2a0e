import io

import repl


def test_repl_prints_results_and_errors(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("1 + 2\n2 $ 3\n3.0 / 2\n"))

    assert repl.main() == 0

    out = capsys.readouterr().out
    assert out.startswith("Welcome to linecalc! Input command")
    assert "Result: 3\n" in out
    assert "Error! illegal character '$' at line 0, col 3 in file stdin\n" in out
    assert "Result: 1.5\n" in out
