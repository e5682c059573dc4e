from doselect.machine import Done, Error, Failed, MachineState, Value, machine_step


class TestTerminalStates:
    def test_value_with_empty_k_produces_done(self):
        result = machine_step(MachineState(C=Value(42)))

        assert isinstance(result, Done)
        assert result.value == 42

    def test_error_with_empty_k_produces_failed(self):
        exc = RuntimeError("fatal error")

        result = machine_step(MachineState(C=Error(exc)))

        assert isinstance(result, Failed)
        assert result.error is exc

    def test_done_preserves_complex_value(self):
        complex_value = {"key": [1, 2, 3], "nested": {"a": "b"}}

        result = machine_step(MachineState(C=Value(complex_value)))

        assert isinstance(result, Done)
        assert result.value == complex_value

    def test_failed_preserves_exception_type(self):
        class CustomError(Exception):
            pass

        result = machine_step(MachineState(C=Error(CustomError("custom"))))

        assert isinstance(result, Failed)
        assert isinstance(result.error, CustomError)
