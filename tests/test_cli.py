import io
import json
import os

from objaxcc.cli import collect_scripts, main


def write(path, text):
    path.write_text(text, encoding='utf-8')
    return path


def test_run_prints_json_result(tmp_path, capsys):
    src = write(tmp_path / 'task.objax', 'define Task\nTask has field "title"\n')

    code = main(['run', str(src)])

    assert code == 0
    data = json.loads(capsys.readouterr().out)
    assert data['classes'][0]['name'] == 'Task'
    assert data['classes'][0]['fields'] == [{'name': 'title', 'defaultValue': None}]
    assert data['errors'] == []


def test_run_exit_code_on_errors(tmp_path, capsys):
    src = write(tmp_path / 'bad.objax', 'define')

    code = main(['run', str(src)])

    assert code == 1
    assert len(json.loads(capsys.readouterr().out)['errors']) == 1


def test_run_reads_stdin(monkeypatch, capsys):
    monkeypatch.setattr('sys.stdin', io.StringIO('define Foo'))

    assert main(['run', '-']) == 0
    assert json.loads(capsys.readouterr().out)['classes'][0]['name'] == 'Foo'


def test_tokens_dump(tmp_path, capsys):
    src = write(tmp_path / 't.objax', 'define Task @')

    code = main(['tokens', str(src)])

    out = capsys.readouterr().out
    assert code == 1
    assert 'DEFINE' in out
    assert "'Task'" in out
    assert 'unexpected character: ->@<-' in out


def test_tree_pretty_prints(tmp_path, capsys):
    src = write(tmp_path / 't.objax', 'define Task\nTask has field "a"')

    assert main(['tree', str(src)]) == 0
    out = capsys.readouterr().out
    assert 'class_definition' in out
    assert 'field_declaration' in out


def test_tree_reports_errors(tmp_path, capsys):
    src = write(tmp_path / 't.objax', 'define')

    assert main(['tree', str(src)]) == 1
    assert '1 error(s)' in capsys.readouterr().out


def test_validate_directory_and_log(tmp_path, capsys):
    scripts = tmp_path / 'scripts'
    (scripts / 'nested').mkdir(parents=True)
    write(scripts / 'good.objax', 'define A\nA has field "x"')
    write(scripts / 'nested' / 'bad.objax', 'define B\nB has "y"')
    write(scripts / 'ignored.txt', '@@@')
    log = tmp_path / 'report.log'

    code = main(['validate', str(scripts), '--log', str(log)])

    out = capsys.readouterr().out
    assert code == 1
    assert 'OK       good.objax' in out
    assert 'FAIL' in out
    assert '2 file(s) checked, 1 failed' in out
    report = log.read_text(encoding='utf-8')
    assert 'bad.objax' in report
    assert 'FIELD' in report


def test_validate_empty_directory(tmp_path, capsys):
    assert main(['validate', str(tmp_path)]) == 0
    assert 'no .objax files' in capsys.readouterr().out


def test_collect_scripts_is_sorted(tmp_path):
    write(tmp_path / 'b.objax', '')
    write(tmp_path / 'a.objax', '')

    assert [os.path.basename(p) for p in collect_scripts(tmp_path)] == ['a.objax', 'b.objax']


def test_missing_file_exit_code(tmp_path):
    assert main(['run', str(tmp_path / 'missing.objax')]) == 2
