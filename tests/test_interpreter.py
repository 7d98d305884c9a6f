import asyncio
import threading
import pytest
from pashtopp import run, run_program, Interpreter, parse_program
from pashtopp.errors import EvalError, RunCancelled


def output_of(source, provider=None):
    result = run_program(source, provider)
    assert result.ok, result.error
    return result.output


def error_of(source, provider=None):
    result = run_program(source, provider)
    assert not result.ok
    return result.error


def test_concatenation():
    assert output_of('olika("Salam" _ "Ji")') == 'SalamJi\n'


def test_concatenation_converts_any_value():
    assert output_of('olika(5 _ "x")') == '5x\n'
    assert output_of('olika(rishtia _ [1, 2.5])') == 'rishtia[1, 2.5]\n'


def test_for_in_over_range():
    assert output_of('che (x we jorkanumbers(0, 3)) { olika(x) }') == '0\n1\n2\n'


def test_empty_range():
    assert output_of('che (x we jorkanumbers(3, 3)) { olika(x) }\nolika("done")') == 'done\n'


def test_function_call():
    assert output_of('opejana jor(a, b) { raka a + b }  olika(jor(3, 4))') == '7\n'


def test_same_source_same_output():
    source = 'x = 0 kala (x < 4) { x = x + 1 olika(x * x) }'
    assert output_of(source) == output_of(source)


def test_olika_joins_arguments_without_separator():
    assert output_of('olika("a", 1, ghalat)\nolika()') == 'a1ghalat\n\n'


def test_olika_returns_nil():
    assert output_of('x = olika("hi")\nolika(x)') == 'hi\nnil\n'


def test_function_value_text():
    assert output_of('opejana f() { }\nolika(f)') == '<opejana f>\n'


def test_function_without_return_gives_nil():
    assert output_of('opejana f() { x = 1 }\nolika(f())') == 'nil\n'


def test_missing_arguments_are_nil_and_extra_are_ignored():
    source = 'opejana f(a, b) { raka a _ "," _ b }\nolika(f(1))\nolika(f(1, 2, 3))'
    assert output_of(source) == '1,nil\n1,2\n'


def test_return_inside_loop_leaves_function():
    source = (
        'opejana pehla(lest) {\n'
        '    che (x we lest) { ko (x > 2) { raka x } }\n'
        '    raka -1\n'
        '}\n'
        'olika(pehla([1, 5, 7]))\n'
        'olika(pehla([1]))\n'
    )
    assert output_of(source) == '5\n-1\n'


def test_top_level_return_ends_program():
    assert output_of('olika(1); raka; olika(2)') == '1\n'


def test_assignment_updates_enclosing_binding():
    assert output_of('x = 1 ko (rishtia) { x = 2 } olika(x)') == '2\n'


def test_block_scoped_binding_is_not_visible_outside():
    error = error_of('ko (rishtia) { y = 1 }\nolika(y)')
    assert error == "RuntimeError: undefined variable 'y' at line 2, column 7"


def test_loop_variable_is_scoped_to_the_body():
    assert "undefined variable 'i'" in error_of('che (i we [1]) { }\nolika(i)')


def test_assignment_is_an_expression():
    assert output_of('olika(a = b = 3)\nolika(a + b)') == '3\n6\n'


def test_closures_see_later_updates():
    source = 'x = 1\nopejana f() { raka x }\nx = 2\nolika(f())'
    assert output_of(source) == '2\n'


def test_recursion():
    source = 'opejana fakt(n) { ko (n <= 1) { raka 1 } raka n * fakt(n - 1) }\nolika(fakt(10))'
    assert output_of(source) == '3628800\n'


def test_runaway_recursion_is_a_runtime_error():
    error = error_of('opejana f(n) { raka f(n + 1) }\nf(0)')
    assert error.startswith('RuntimeError: maximum recursion depth exceeded')


def test_equality_across_kinds_is_false():
    assert output_of('olika(1 == "1", 0 == ghalat, [] == [])') == 'ghalatghalatrishtia\n'


def test_number_text():
    assert output_of('olika(0.1 + 0.2)\nolika(10 / 4)\nolika(3.0)') == '0.30000000000000004\n2.5\n3\n'


def test_modulo_takes_sign_of_dividend():
    assert output_of('olika(7 % -3)\nolika(-7 takseembaki 3)') == '1\n-1\n'


def test_arithmetic_requires_numbers():
    error = error_of('olika(5 + "x")')
    assert error == (
        "RuntimeError: operator '+' expects Number operands, got Number and String at line 1, column 7"
    )


def test_comparison_requires_numbers():
    assert "operator '<'" in error_of('olika("a" < "b")')


def test_division_by_zero():
    assert error_of('x = 1 / 0') == 'RuntimeError: division by zero at line 1, column 5'
    assert 'modulo by zero' in error_of('x = 1 % 0')


def test_while_condition_must_be_boolean():
    error = error_of('kala (1) { }')
    assert error == 'RuntimeError: kala condition must be Boolean, got Number at line 1, column 1'


def test_if_condition_must_be_boolean():
    assert 'ko condition must be Boolean, got String' in error_of('ko ("rishtia") { }')


def test_for_in_requires_array():
    assert 'che loop can only iterate an Array, got Number' in error_of('che (x we 5) { }')


def test_calling_a_non_function():
    assert "cannot call 'x' of type Number" in error_of('x = 5\nx()')


def test_builtins_cannot_be_rebound():
    assert "cannot assign to built-in 'olika'" in error_of('olika = 5')
    assert "cannot assign to built-in 'max'" in error_of('max = 5')
    assert "cannot redefine built-in 'oshmara'" in error_of('opejana oshmara(x) { }')


def test_builtins_can_only_be_called():
    assert "built-in 'max' can only be called" in error_of('f = max')


def test_builtin_arity():
    assert error_of('oshmara()') == 'RuntimeError: oshmara expects 1 argument(s), got 0 at line 1, column 1'
    assert 'jorkanumbers expects 2 argument(s), got 1' in error_of('jorkanumbers(1)')
    assert 'max expects at least 1 argument(s), got 0' in error_of('max()')
    assert 'oghwara expects 0 to 1 argument(s), got 2' in error_of('oghwara("a", "b")')


def test_builtin_argument_kinds():
    error = error_of('\n  oshmara("abc")')
    assert error == 'RuntimeError: oshmara argument must be Array, got String at line 2, column 3'
    assert 'max #2 argument must be Number, got String' in error_of('max(1, "2")')
    assert 'jorkanumbers end argument must be Number' in error_of('jorkanumbers(0, "3")')


def test_numeric_builtins():
    assert output_of('olika(max(2, 9, 4), min(2, 9, 4), abs(-3), oshmara([]))') == '9230\n'


def test_input_strips_one_line_ending(feed_input):
    source = 'a = oghwara()\nb = oghwara()\nolika(a _ "|" _ b _ "|")'
    assert output_of(source, feed_input('salam\r\n', 'ji\n\n')) == 'salam|ji\n|\n'


def test_input_prompt_is_written_first(feed_input):
    assert output_of('olika(oghwara("> "))', feed_input('x')) == '> x\n'


def test_input_prompt_must_be_string(feed_input):
    assert 'oghwara prompt must be String, got Number' in error_of('oghwara(5)', feed_input('x'))


def test_input_without_provider():
    error = error_of('olika("a")\nx = oghwara()')
    assert error == 'RuntimeError: no input provider is attached to this run at line 2, column 5'


def test_input_exhausted(feed_input):
    assert 'no more input' in error_of('oghwara()\noghwara()', feed_input('one'))


def test_input_provider_must_return_text():
    async def provider():
        return 42

    assert 'input provider returned int' in error_of('oghwara()', provider)


def test_input_always_yields_a_string(feed_input):
    assert output_of('olika(oghwara() == "5")', feed_input('5\n')) == 'rishtia\n'


def test_echo_receives_chunks_in_order():
    chunks = []

    async def provider():
        # the prompt has been echoed before input is requested
        chunks.append('<wait>')
        return 'Ahmad'

    result = asyncio.run(run('olika("a")\nolika(oghwara("Num: "))', provider, echo=chunks.append))
    assert result.ok
    assert chunks == ['a\n', 'Num: ', '<wait>', 'Ahmad\n']


def test_cancelled_run_stops_the_loop():
    cancel = threading.Event()
    cancel.set()
    result = run_program('olika("start")\nkala (rishtia) { }', cancel=cancel)
    assert result.output == 'start\n'
    assert result.error == 'RuntimeError: execution cancelled at line 2, column 1'


def test_cancel_checked_on_function_calls():
    class Flag:
        calls = 0

        def is_set(self):
            self.calls += 1
            return self.calls > 3

    result = run_program('opejana f(n) { olika(n) raka f(n + 1) }\nf(1)', cancel=Flag())
    assert result.output == '1\n2\n3\n'
    assert 'execution cancelled' in result.error


def test_interpreter_raises_pashto_errors():
    interp = Interpreter()
    with pytest.raises(EvalError) as exc:
        asyncio.run(interp.run(parse_program('olika(1)\nolika(2 + rishtia)')))
    assert exc.value.line == 2
    assert interp.output == '1\n'


def test_run_cancelled_is_a_runtime_error():
    cancel = threading.Event()
    cancel.set()
    interp = Interpreter(cancel=cancel)
    with pytest.raises(RunCancelled) as exc:
        asyncio.run(interp.run(parse_program('che (i we [1]) { }')))
    assert exc.value.err.name == 'RuntimeError'


def test_runs_do_not_share_state():
    assert output_of('x = 1 olika(x)') == '1\n'
    assert "undefined variable 'x'" in error_of('olika(x)')


def test_debug_trace(tmp_path):
    trace = tmp_path / 'trace.txt'
    source = 'opejana f(a) { raka a }\nx = f(1)\nko (x == 1) { olika(x) }'
    result = run_program(source, debug_level=3, debug_file=str(trace))
    assert result.ok
    text = trace.read_text(encoding='utf-8')
    assert 'define function f(a)' in text
    assert 'call f with 1 argument(s)' in text
    assert 'assign x = 1' in text
    assert 'ko condition at 3:1 -> rishtia' in text
    assert text.rstrip().endswith('run: finished')


def test_debug_trace_records_abort(tmp_path):
    trace = tmp_path / 'trace.txt'
    result = run_program('olika(y)', debug_level=1, debug_file=str(trace))
    assert not result.ok
    text = trace.read_text(encoding='utf-8')
    assert "run: aborted: RuntimeError: undefined variable 'y'" in text
    assert 'assign' not in text


def test_no_trace_file_by_default(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    run_program('olika(1)')
    assert not (tmp_path / 'debug.txt').exists()


def test_long_operator_chain_is_a_runtime_error():
    source = 'olika("a")\nolika(' + ' + '.join(['1'] * 1500) + ')'
    result = run_program(source)
    assert result.output == 'a\n'
    assert result.error.startswith('RuntimeError: maximum recursion depth exceeded')


def test_while_body_scope_is_shared_across_iterations():
    source = 'i = 0 kala (i < 2) { ko (i == 1) { olika(y) } y = 5 i = i + 1 }'
    assert output_of(source) == '5\n'


def test_while_body_bindings_stay_inside_the_loop():
    assert "undefined variable 'y'" in error_of('i = 0 kala (i < 1) { y = 1 i = i + 1 }\nolika(y)')


def test_range_bounds_must_be_whole_numbers():
    assert 'jorkanumbers start argument must be a whole number, got 0.5' in error_of('jorkanumbers(0.5, 3)')
    assert 'jorkanumbers end argument must be a whole number, got 2.5' in error_of('jorkanumbers(0, 2.5)')
    assert output_of('olika(jorkanumbers(-2, 1))') == '[-2, -1, 0]\n'
