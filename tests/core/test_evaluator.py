"""Tests for PythonEvaluator."""

from __future__ import annotations

import traceback
import types

import pytest

from burrow.core.evaluator import Evaluator, PythonEvaluator


class Hello:
    pass


class TestContexts:
    """Tests for context creation."""

    def test_satisfies_protocol(self, evaluator):
        """PythonEvaluator implements the Evaluator protocol."""
        assert isinstance(evaluator, Evaluator)

    def test_top_level_is_identity_stable(self, evaluator):
        """Repeated requests return the same top-level context."""
        first = evaluator.create_top_level_context()
        second = evaluator.create_top_level_context()

        assert first is second
        assert first.top_level is True
        assert first.globals is first.locals

    def test_context_for_main_is_top_level(self, evaluator, main_module):
        """The main module maps to the top-level context."""
        assert evaluator.context_for(main_module) is evaluator.create_top_level_context()

    def test_default_main_module(self):
        """Without an explicit module, __main__ is used."""
        import sys

        assert PythonEvaluator().main_module is sys.modules["__main__"]

    @pytest.mark.parametrize("target", [object(), Hello, 3, [1, 2]])
    def test_object_context_does_not_leak_locals(self, evaluator, target):
        """A fresh object context only knows `self`."""
        top = evaluator.create_top_level_context()
        evaluator.evaluate(top, "leaked = 1")

        context = evaluator.context_for(target)

        assert context.locals == {"self": target}

    def test_broken_eq_is_fine(self, evaluator):
        """Targets whose __eq__ raises still get a context."""

        class Broken:
            def __eq__(self, other):
                raise RuntimeError("no comparisons")

            __hash__ = object.__hash__

        target = Broken()
        context = evaluator.context_for(target)
        assert context.target is target

    def test_module_context_uses_module_namespace(self, evaluator):
        """Code run in a module context defines names on the module."""
        module = types.ModuleType("plugin")
        context = evaluator.context_for(module)

        evaluator.evaluate(context, "def hello():\n    return 'hi'\n")

        assert module.hello() == "hi"
        assert context.name == "plugin"

    def test_object_context_sees_parent_globals(self, evaluator):
        """Object contexts read names from the parent's globals."""
        top = evaluator.create_top_level_context()
        evaluator.evaluate(top, "answer = 42")

        context = evaluator.context_for(object(), parent=top)

        assert evaluator.evaluate(context, "answer") == 42

    def test_object_assignments_stay_local(self, evaluator, main_module):
        """Names assigned inside an object context do not reach the top level."""
        context = evaluator.context_for(object())
        evaluator.evaluate(context, "inner = 1")

        assert "inner" not in main_module.__dict__

    def test_labels(self, evaluator):
        """Labels name the top level, modules, classes and values."""
        top = evaluator.create_top_level_context()
        assert evaluator.context_label(top) == "main"
        assert evaluator.context_for(Hello).name == "Hello"
        assert evaluator.context_for(1).name == "1"
        assert len(evaluator.context_for("x" * 200).name) < 40


class TestEvaluate:
    """Tests for evaluate."""

    def test_expression_value(self, evaluator):
        """An expression returns its value."""
        top = evaluator.create_top_level_context()
        assert evaluator.evaluate(top, "2 + 2") == 4

    def test_assignment_value(self, evaluator):
        """A trailing assignment returns the assigned value."""
        top = evaluator.create_top_level_context()
        assert evaluator.evaluate(top, "x = 5") == 5
        assert evaluator.evaluate(top, "x += 1") == 6
        assert evaluator.evaluate(top, "y: int = 3") == 3

    def test_statement_returns_none(self, evaluator):
        """Other statements return None."""
        top = evaluator.create_top_level_context()
        assert evaluator.evaluate(top, "import os") is None
        assert evaluator.evaluate(top, "a, b = 1, 2") is None
        assert evaluator.evaluate(top, "def f():\n    return 1\n") is None

    def test_multiple_statements(self, evaluator):
        """Earlier statements run before the final expression."""
        top = evaluator.create_top_level_context()
        assert evaluator.evaluate(top, "a = 20\nb = 22\na + b") == 42

    def test_empty_source(self, evaluator):
        """Blank source evaluates to None."""
        top = evaluator.create_top_level_context()
        assert evaluator.evaluate(top, "   \n# just a comment\n") is None

    def test_self_is_target(self, evaluator):
        """`self` evaluates to the context's target."""
        target = object()
        assert evaluator.evaluate(evaluator.context_for(target), "self") is target

    def test_set_attribute_on_target(self, evaluator):
        """Attributes set through `self` land on the live object."""
        target = Hello()
        evaluator.evaluate(evaluator.context_for(target), "self.x = 10")
        assert target.x == 10

    def test_errors_propagate(self, evaluator):
        """Exceptions raised by the code reach the caller."""
        top = evaluator.create_top_level_context()
        with pytest.raises(NameError):
            evaluator.evaluate(top, "undefined_name")
        with pytest.raises(SyntaxError):
            evaluator.evaluate(top, "1 +")

    def test_filename_in_traceback(self, evaluator):
        """The filename argument is used for compiled code."""
        top = evaluator.create_top_level_context()
        with pytest.raises(ZeroDivisionError) as excinfo:
            evaluator.evaluate(top, "1 / 0", filename="startup.py")
        frames = traceback.extract_tb(excinfo.value.__traceback__)
        assert frames[-1].filename == "startup.py"


class TestIsComplete:
    """Tests for is_complete."""

    @pytest.mark.parametrize(
        "source",
        [
            "1 + 1",
            "x = 5;",
            "x = (\n1 + 4)",
            "def f():\n    return 1\n",
            "1 +",  # invalid, reported by evaluate
        ],
    )
    def test_complete(self, evaluator, source):
        """Complete or invalid input needs no more lines."""
        assert evaluator.is_complete(source) is True

    @pytest.mark.parametrize(
        "source",
        [
            "x = (",
            "def f():",
            "def f():\n    return 1",
            "if True:\n    x = 1",
            "s = '''abc",
        ],
    )
    def test_incomplete(self, evaluator, source):
        """Open brackets, blocks and strings wait for more input."""
        assert evaluator.is_complete(source) is False

    def test_does_not_mutate_input(self, evaluator):
        """Checking completeness leaves the buffer untouched."""
        clean = "print('''\nhi\n''')\n"
        buffer = clean
        evaluator.is_complete(buffer)
        assert buffer == clean


class TestIsSuppressed:
    """Tests for the trailing-semicolon rule."""

    @pytest.mark.parametrize(
        "source",
        [
            "x = 5;",
            "Exception('boom');",
            "x = 5;   ",
            "x = 5;  # trailing comment",
            "def blah():\n    return 1;\n",
            "x = (\n1 + 4);\n\n",
        ],
    )
    def test_suppressed(self, evaluator, source):
        """A final `;` suppresses display, ignoring whitespace and comments."""
        assert evaluator.is_suppressed(source) is True

    @pytest.mark.parametrize(
        "source",
        [
            "x = 5",
            "s = 'a;'",
            "x = 5  # done;",
            "x = 5; y = 6",
            "",
        ],
    )
    def test_not_suppressed(self, evaluator, source):
        """Semicolons inside strings or comments, or mid-line, do not count."""
        assert evaluator.is_suppressed(source) is False

    def test_untokenizable_input_falls_back(self, evaluator):
        """Input tokenize cannot handle uses a plain trailing check."""
        assert evaluator.is_suppressed("s = '''open;") is True
        assert evaluator.is_suppressed("s = '''open") is False
