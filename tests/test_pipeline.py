import json
from concurrent.futures import ThreadPoolExecutor

import pytest

import objaxcc
from objaxcc import ObjaxError, ObjaxFrontend, execute
from objaxcc.semantic.model import ExecutionResult


@pytest.fixture(scope="module")
def frontend():
    return ObjaxFrontend()


TASK_SOURCE = '''
define Task
Task has field "title"
Task has field "done" has default "no"

define Project
Project has field "name"
'''


def test_execute_extracts_classes_and_fields(frontend):
    result = frontend.execute(TASK_SOURCE)

    assert result.errors == []
    assert result.instances == []
    assert [c.name for c in result.classes] == ['Task', 'Project']
    assert result.classes[0].field_names == ['title', 'done']
    assert result.classes[1].field_names == ['name']


@pytest.mark.parametrize("src", [TASK_SOURCE, "define Foo", "", "@@@", "define"])
def test_execute_is_idempotent(frontend, src):
    assert frontend.execute(src) == frontend.execute(src)


@pytest.mark.parametrize("src", ["", "   \n\t ", "// a comment", "  // one\n\n// two  "])
def test_blank_or_comment_only_input(frontend, src):
    assert frontend.execute(src) == ExecutionResult(classes=[], instances=[], errors=[])


def test_class_with_zero_fields(frontend):
    result = frontend.execute("define Foo")

    assert len(result.classes) == 1
    assert result.classes[0].name == 'Foo'
    assert result.classes[0].fields == []


def test_field_name_ignores_unused_default(frontend):
    result = frontend.execute('define Book\nBook has field "title" has default "X"')

    field = result.classes[0].fields[0]
    assert field.name == 'title'
    assert field.default_value is None


def test_lexical_error_stops_before_parsing(frontend):
    result = frontend.execute('define Foo @@@')

    assert result.classes == []
    assert result.errors == ["unexpected character: ->@<- at offset: 11, skipped 3 characters."]


def test_lexical_error_hides_syntax_errors(frontend):
    # 'define' alone would also be a syntax error
    result = frontend.execute('define ?')

    assert len(result.errors) == 1
    assert result.errors[0].startswith('unexpected character')


def test_missing_identifier_is_a_syntax_error(frontend):
    result = frontend.execute('define')

    assert result.classes == []
    assert result.instances == []
    assert result.errors == [
        "Expecting IDENTIFIER but found --> 'end of input' <-- in rule 'class_definition'",
    ]


def test_every_syntax_error_is_returned_and_nothing_is_extracted(frontend):
    result = frontend.execute('define A\nA has "x"\ndefine B\nB has field "ok"\ndefine')

    assert len(result.errors) == 2
    assert result.classes == []


def test_instance_creation_is_not_supported(frontend):
    result = frontend.execute('define Task\nmyTask is a Task')

    assert result.errors
    assert result.instances == []


def test_internal_errors_are_caught(frontend, monkeypatch):
    class BrokenExtractor:
        def extract(self, root):
            raise RuntimeError("boom")

    monkeypatch.setattr(objaxcc.pipeline, 'Extractor', BrokenExtractor)

    result = frontend.execute('define Foo')

    assert result.errors == ["Internal error: RuntimeError: boom"]
    assert result.classes == []


def test_process_string_keeps_intermediate_stages(frontend):
    result = frontend.process_string(TASK_SOURCE, source_name='tasks.objax')

    assert result.success
    assert result.source_name == 'tasks.objax'
    assert len(result.tokens) == 19
    assert len(result.cst.statements) == 2
    assert result.program.get_class('Task') is not None


def test_process_string_failure_reports_positions(frontend):
    result = frontend.process_string('define A\nA has "x"')

    assert not result.success
    assert result.cst is None
    assert result.program is None
    diag = result.diags.errors[0]
    assert (diag.line, diag.column) == (2, 7)
    assert '2:7' in result.diags.report()


def test_process_file(frontend, tmp_path):
    path = tmp_path / 'task.objax'
    path.write_text('define Task\nTask has field "title"\n', encoding='utf-8')

    result = frontend.process_file(path)

    assert result.success
    assert result.program.classes[0].field_names == ['title']


def test_process_missing_file(frontend, tmp_path):
    result = frontend.process_file(tmp_path / 'nope.objax')

    assert not result.success
    assert 'file not found' in result.diags.errors[0].message


def test_check_raises_on_errors(frontend):
    with pytest.raises(ObjaxError) as excinfo:
        frontend.check('define')

    assert len(excinfo.value.diagnostics) == 1
    assert frontend.check('define Foo').classes[0].name == 'Foo'


def test_result_serialises_to_json(frontend):
    data = json.loads(json.dumps(frontend.execute(TASK_SOURCE).to_dict()))

    assert data['classes'][0] == {
        'name': 'Task',
        'fields': [
            {'name': 'title', 'defaultValue': None},
            {'name': 'done', 'defaultValue': None},
        ],
        'methods': [],
    }
    assert data['instances'] == []
    assert data['errors'] == []


def test_module_level_execute_uses_shared_frontend():
    assert objaxcc.default_frontend() is objaxcc.default_frontend()
    assert execute('define Foo').classes[0].name == 'Foo'


def test_concurrent_calls_do_not_share_state(frontend):
    sources = [f'define C{i}\nC{i} has field "f{i}"' for i in range(40)]
    sources += ['define'] * 10

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(frontend.execute, sources))

    for i, result in enumerate(results[:40]):
        assert result.errors == []
        assert result.classes[0].name == f'C{i}'
        assert result.classes[0].field_names == [f'f{i}']
    assert all(len(r.errors) == 1 for r in results[40:])
