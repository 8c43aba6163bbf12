"""
Unit tests for calculation and default-value cascades.

The sample definition wires ageGroup/caregiver -> total (calc) and
total -> totalRadio (default value), evaluated with json-logic.
"""

import logging

import pytest

from form_engine.config.engine import EngineConfig
from form_engine.errors import TriggerCycleError, UnknownFieldError
from form_engine.fields import Field, Option
from form_engine.runtime.dependencies import find_trigger_cycle, resolve_default_value_conditions
from form_engine.runtime.instance import FormInstance
from form_engine.validation.service import ValidationStatus
from tests.fixtures.form_fixtures import CallableEvaluator, StaticValidator, single_subsection_definition


class TestCalculationCascade:
    """calcTriggerMap driven recomputation."""

    def test_calc_then_default_value(self, instance):
        instance.update_field("ageGroup", 6)

        assert instance.get_model_value("total") == 6
        assert instance.get_model_value("totalRadio") == "low"

        instance.update_field("caregiver", 7)

        assert instance.get_model_value("total") == 13
        assert instance.get_model_value("totalRadio") == "high"
        assert instance.get_field("total").dirty is True
        assert instance.get_field("totalRadio").dirty is True

    def test_single_calculate_fields_call(self, instance):
        instance.set_model_value("ageGroup", 6, instance.get_field("ageGroup"))
        instance.set_model_value("caregiver", 7, instance.get_field("caregiver"))

        instance.calculate_fields(instance.get_field("caregiver"))

        assert instance.get_model()["total"] == {"value": 13}
        assert instance.get_model()["totalRadio"] == {"value": "high"}

    def test_string_operands_coerced(self, instance):
        instance.update_field("ageGroup", "4")
        instance.update_field("caregiver", 2.5)

        assert instance.get_model_value("total") == 6.5

    def test_non_calc_field_does_nothing(self, definition):
        evaluator = CallableEvaluator()
        instance = FormInstance(definition, {}, None, evaluator=evaluator)

        instance.calculate_fields(instance.get_field("name"))

        assert evaluator.calls == []
        assert instance.get_model() == {}

    def test_calc_field_without_dependents(self):
        definition = single_subsection_definition({"score": {"type": "NUMBER", "id": "s", "calc": True}})
        instance = FormInstance(definition, {}, None)

        instance.update_field("score", 3)

        assert instance.get_model() == {"score": {"value": 3}}

    def test_missing_calc_expression_skipped(self, definition, caplog):
        del definition["calcExpressionMap"]["total"]
        instance = FormInstance(definition, {}, None)

        with caplog.at_level(logging.WARNING, logger="form_engine.runtime.dependencies"):
            instance.update_field("ageGroup", 6)

        assert instance.get_model_value("total") is None
        assert "No calc expression for 'total'" in caplog.text

    def test_each_trigger_recomputes(self, definition):
        evaluator = CallableEvaluator()
        definition["calcExpressionMap"]["total"] = lambda inst: 42
        definition["defaultValueTriggerMap"] = {}
        instance = FormInstance(definition, {}, None, evaluator=evaluator)

        instance.update_field("ageGroup", 1)
        instance.update_field("ageGroup", 2)

        expression_calls = [c for c in evaluator.calls if c[0] == "expression"]
        assert len(expression_calls) == 2
        assert instance.get_model_value("total") == 42


class TestDefaultValueConditions:
    """Ordered application of default value conditions."""

    def _instance(self, field_spec, **extra):
        definition = single_subsection_definition(
            {"source": {"type": "STRING"}, "target": field_spec},
            defaultValueTriggerMap={"source": ["target"]},
            **extra,
        )
        return FormInstance(definition, {}, None, evaluator=CallableEvaluator())

    def test_last_true_condition_wins(self):
        instance = self._instance({
            "type": "STRING",
            "defaultValueConditions": [
                {"condition": True, "expression": "first"},
                {"condition": False, "expression": "skipped"},
                {"condition": True, "expression": "last"},
            ],
        })

        instance.update_field("source", "go")

        assert instance.get_model_value("target") == "last"

    def test_no_true_condition_leaves_value(self):
        instance = self._instance({
            "type": "STRING",
            "defaultValueConditions": [{"condition": False, "expression": "never"}],
        })
        instance.set_model_value("target", "typed", instance.get_field("target"))

        instance.update_field("source", "go")

        assert instance.get_model_value("target") == "typed"

    def test_expression_reads_instance(self):
        instance = self._instance({
            "type": "STRING",
            "defaultValueConditions": [
                {
                    "condition": lambda inst: inst.get_model_value("source") == "copy",
                    "expression": lambda inst: inst.get_model_value("source").upper(),
                }
            ],
        })

        instance.update_field("source", "copy")

        assert instance.get_model_value("target") == "COPY"

    def test_none_default_clears(self):
        instance = self._instance({
            "type": "STRING",
            "defaultValueConditions": [{"condition": True, "expression": None}],
        })
        instance.set_model_value("target", "typed", instance.get_field("target"))

        instance.update_field("source", "go")

        assert instance.get_model_value("target") is None
        assert instance.get_field("target").dirty is False

    def test_option_conditions_flattened_in_order(self):
        instance = self._instance({
            "type": "STRING",
            "options": [
                {"id": "a", "defaultValueConditions": [{"condition": True, "expression": "a"}]},
                {"id": "b"},
                {"id": "c", "defaultValueConditions": [{"condition": True, "expression": "c"}]},
            ],
        })

        instance.update_field("source", "go")

        assert instance.get_model_value("target") == "c"

    def test_array_defaults_toggle_into_current_value(self):
        instance = self._instance({
            "type": "ARRAY",
            "defaultValueConditions": [
                {"condition": True, "expression": "a"},
                {"condition": True, "expression": "b"},
            ],
        })

        instance.update_field("source", "go")
        assert instance.get_model_value("target") == ["a", "b"]

        # No deduplication: a second pass toggles both back out
        instance.update_field("source", "again")
        assert instance.get_model_value("target") == []

    def test_array_defaults_append_for_multi_select(self):
        instance = self._instance(
            {
                "type": "ARRAY",
                "defaultValueConditions": [{"condition": True, "expression": ["a", "b"]}],
            },
            uiSchema={"target": {"component": {"type": "MULTI_SELECT"}}},
        )
        instance.set_model_value("target", ["b"], instance.get_field("target"))

        instance.update_field("source", "go")

        assert instance.get_model_value("target") == ["b", "a"]

    def test_evaluate_directly(self, instance):
        instance.set_model_value("total", 3, instance.get_field("total"))

        instance.evaluate_default_value_conditions(["totalRadio"])

        assert instance.get_model_value("totalRadio") == "low"

    def test_tag_without_dependents(self, definition):
        evaluator = CallableEvaluator()
        instance = FormInstance(definition, {}, None, evaluator=evaluator)

        instance.trigger_default_value_evaluation("name")

        assert evaluator.calls == []


class TestResolveDefaultValueConditions:
    def test_own_conditions_take_precedence(self):
        own = [{"condition": True, "expression": 1}]
        field = Field(
            tag="t",
            type="NUMBER",
            default_value_conditions=own,
            options=[Option(id="x", default_value_conditions=[{"condition": True, "expression": 2}])],
        )

        assert resolve_default_value_conditions(field) == own

    def test_no_conditions(self):
        assert resolve_default_value_conditions(Field(tag="t", type="STRING")) == []


class TestTriggerCycles:
    """Optional detection of cyclic trigger maps."""

    def _cyclic(self):
        return single_subsection_definition(
            {"a": {"type": "STRING"}, "b": {"type": "STRING"}},
            defaultValueTriggerMap={"a": ["b"], "b": ["a"]},
        )

    def test_cycle_rejected_when_enabled(self):
        with pytest.raises(TriggerCycleError) as exc_info:
            FormInstance(self._cyclic(), {}, None, config=EngineConfig(check_trigger_cycles=True))

        assert exc_info.value.cycle == ["a", "b", "a"]
        assert "a -> b -> a" in str(exc_info.value)

    def test_cycle_allowed_by_default(self):
        instance = FormInstance(self._cyclic(), {}, None)

        assert instance.get_field("a") is not None

    def test_calc_edges_use_field_tags(self, instance):
        definition = instance.definition
        definition["defaultValueTriggerMap"]["totalRadio"] = ["ageGroup"]

        cycle = find_trigger_cycle(definition, instance.get_fields())

        assert cycle is not None
        assert cycle[0] == cycle[-1]
        assert "ageGroup" in cycle

    def test_sample_definition_is_acyclic(self, instance):
        assert find_trigger_cycle(instance.definition, instance.get_fields()) is None


class TestUpdateField:
    """The edit path used by rendering layers."""

    def test_unknown_tag(self, instance):
        with pytest.raises(UnknownFieldError, match="missing"):
            instance.update_field("missing", 1)

    def test_unknown_tag_is_a_key_error(self, instance):
        with pytest.raises(KeyError):
            instance.update_field("missing", 1)

    def test_returns_stored_value(self):
        definition = single_subsection_definition({"goals": {"type": "ARRAY"}})
        instance = FormInstance(definition, {}, None)

        assert instance.update_field("goals", "run") == ["run"]
        assert instance.update_field("goals", "swim") == ["run", "swim"]
        assert instance.update_field("goals", "run") == ["swim"]
        assert instance.update_field("goals", None) is None
        assert instance.get_model() == {}

    def test_live_validation_runs_after_each_edit(self, definition):
        validator = StaticValidator({"name": ValidationStatus.ERROR})
        instance = FormInstance(definition, {}, validator)
        runs_after_init = validator.runs

        instance.update_field("nickname", "Rex")
        instance.update_field("nickname", "Max")

        assert validator.runs == runs_after_init + 2
        assert instance.has_error("name")

    def test_live_validation_off_in_definition(self, definition):
        definition["liveValidation"] = False
        validator = StaticValidator()
        instance = FormInstance(definition, {}, validator)
        runs_after_init = validator.runs

        instance.update_field("nickname", "Rex")

        assert not instance.is_live_validation()
        assert validator.runs == runs_after_init

    def test_live_validation_off_in_config(self, definition):
        validator = StaticValidator()
        instance = FormInstance(
            definition, {}, validator, config=EngineConfig(live_validation=False, validate_on_init=False)
        )

        instance.update_field("nickname", "Rex")

        assert validator.runs == 0

    def test_definition_flag_overrides_config(self, definition):
        definition["liveValidation"] = True

        instance = FormInstance(definition, {}, None, config=EngineConfig(live_validation=False))

        assert instance.is_live_validation() is True


class TestCascadeOrdering:
    """Cascades run as plain synchronous calls without deduplication."""

    def test_same_tag_reached_by_both_chains(self, monkeypatch):
        definition = single_subsection_definition(
            {
                "source": {"type": "NUMBER", "id": "src", "calc": True},
                "target": {
                    "type": "STRING",
                    "defaultValueConditions": [{"condition": True, "expression": "from-default"}],
                },
            },
            calcExpressionMap={"target": lambda inst: "from-calc"},
            calcTriggerMap={"src": ["target"]},
            defaultValueTriggerMap={"source": ["target"]},
        )
        instance = FormInstance(definition, {}, None, evaluator=CallableEvaluator())

        writes = []
        store_write = instance.set_model_value

        def record(tag, value, field):
            writes.append((tag, value))
            store_write(tag, value, field)

        monkeypatch.setattr(instance, "set_model_value", record)

        instance.update_field("source", 1)

        assert writes == [
            ("source", 1),
            ("target", "from-calc"),
            ("target", "from-default"),
        ]
        assert instance.get_model_value("target") == "from-default"


class FailingEvaluator(CallableEvaluator):
    def eval_expression(self, expression, instance):
        raise ZeroDivisionError("division by zero")


class TestCollaboratorErrors:
    def test_evaluator_error_propagates(self, definition):
        instance = FormInstance(definition, {}, None, evaluator=FailingEvaluator())

        with pytest.raises(ZeroDivisionError, match="division by zero"):
            instance.update_field("ageGroup", 6)

        assert instance.get_model_value("ageGroup") == 6
        assert instance.get_model_value("total") is None

    def test_blank_divisor_raises_from_default_evaluator(self):
        definition = single_subsection_definition(
            {
                "amount": {"type": "NUMBER", "id": "amt", "calc": True},
                "count": {"type": "NUMBER"},
                "ratio": {"type": "NUMBER"},
            },
            calcExpressionMap={
                "ratio": {
                    "type": "DIVIDE",
                    "expressions": [
                        {"type": "FORM_RESPONSE", "tag": "amount"},
                        {"type": "FORM_RESPONSE", "tag": "count"},
                    ],
                }
            },
            calcTriggerMap={"amt": ["ratio"]},
        )
        instance = FormInstance(definition, {}, None)

        with pytest.raises(ZeroDivisionError):
            instance.update_field("amount", 10)
