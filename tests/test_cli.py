import io
import json
import pytest
from pashtopp.__main__ import main


def write_program(tmp_path, source, name='program.ppp'):
    path = tmp_path / name
    path.write_text(source, encoding='utf-8')
    return path


def test_runs_program(tmp_path, capsys):
    path = write_program(tmp_path, 'olika("Salam" _ "Ji")')
    main([str(path)])
    assert capsys.readouterr().out == 'SalamJi\n'


def test_reads_input_from_stdin(tmp_path, capsys, monkeypatch):
    monkeypatch.setattr('sys.stdin', io.StringIO('Ahmad\n'))
    path = write_program(tmp_path, 'num = oghwara("Num: ")\nolika("Salam, " _ num)')
    main([str(path)])
    assert capsys.readouterr().out == 'Num: Salam, Ahmad\n'


def test_error_goes_to_stderr(tmp_path, capsys):
    path = write_program(tmp_path, 'olika(1)\nolika(x)')
    with pytest.raises(SystemExit) as exc:
        main([str(path)])
    assert exc.value.code == 1
    captured = capsys.readouterr()
    assert captured.out == '1\n'
    assert captured.err.strip() == "RuntimeError: undefined variable 'x' at line 2, column 7"


def test_syntax_error_exits(tmp_path, capsys):
    path = write_program(tmp_path, 'ko (rishtia {')
    with pytest.raises(SystemExit) as exc:
        main([str(path)])
    assert exc.value.code == 1
    assert capsys.readouterr().err.startswith('SyntaxError:')


def test_missing_file(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        main([str(tmp_path / 'nashta.ppp')])
    assert exc.value.code == 1
    assert 'not found' in capsys.readouterr().err


def test_emit_and_run_ast(tmp_path, capsys):
    path = write_program(tmp_path, 'opejana jor(a, b) { raka a + b }\nolika(jor(3, 4))')
    main(['--emit-ast', str(path)])
    out_path = tmp_path / 'program.ppp.ast.json'
    assert capsys.readouterr().out.strip() == str(out_path)
    data = json.loads(out_path.read_text(encoding='utf-8'))
    assert data['type'] == 'Program'
    main(['--ast', str(out_path)])
    assert capsys.readouterr().out == '7\n'


def test_timeout_cancels_runaway_loop(tmp_path, capsys):
    path = write_program(tmp_path, 'kala (rishtia) { }')
    with pytest.raises(SystemExit) as exc:
        main(['--timeout', '0.2', str(path)])
    assert exc.value.code == 1
    assert 'execution cancelled' in capsys.readouterr().err


def test_verbose_writes_debug_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = write_program(tmp_path, 'x = 1')
    main(['-vv', str(path)])
    assert 'assign x = 1' in (tmp_path / 'debug.txt').read_text(encoding='utf-8')


def test_program_required(capsys):
    with pytest.raises(SystemExit) as exc:
        main([])
    assert exc.value.code == 2


def test_malformed_ast_file(tmp_path, capsys):
    path = write_program(tmp_path, '{"type": "Program", ', name='broken.ast.json')
    with pytest.raises(SystemExit) as exc:
        main(['--ast', str(path)])
    assert exc.value.code == 1
    assert capsys.readouterr().err.startswith('Error: invalid AST file:')
