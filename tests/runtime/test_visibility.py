"""Unit tests for show conditions and clearing of hidden answers."""

from form_engine.runtime.instance import FormInstance
from tests.fixtures.form_fixtures import CallableEvaluator, single_subsection_definition


class TestShowConditions:
    def test_field_without_condition_is_shown(self, instance):
        assert instance.evaluate_show_condition(instance.get_field("name"), "name") is True

    def test_json_logic_condition(self, instance):
        nickname = instance.get_field("nickname")

        assert instance.is_visible(nickname) is False

        instance.update_field("hasPets", True)

        assert instance.is_visible(nickname) is True

    def test_hidden_field_is_cleared(self, instance):
        nickname = instance.get_field("nickname")
        instance.update_field("hasPets", True)
        instance.update_field("nickname", "Rex")

        instance.update_field("hasPets", False)
        shown = instance.evaluate_show_condition(nickname, "nickname")

        assert shown is False
        assert instance.get_model_value("nickname") is None
        assert nickname.dirty is False

    def test_visible_field_keeps_value(self, instance):
        instance.update_field("hasPets", True)
        instance.update_field("nickname", "Rex")

        assert instance.evaluate_show_condition(instance.get_field("nickname"), "nickname") is True
        assert instance.get_model_value("nickname") == "Rex"

    def test_is_visible_has_no_side_effects(self, instance):
        instance.set_model_value("nickname", "Rex", instance.get_field("nickname"))

        assert instance.is_visible(instance.get_field("nickname")) is False
        assert instance.get_model_value("nickname") == "Rex"


class TestIdempotence:
    """Re-evaluating a hidden, cleared field writes nothing."""

    def test_second_evaluation_does_not_write(self, monkeypatch):
        definition = single_subsection_definition({
            "secret": {"type": "STRING", "showCondition": lambda inst: False},
        })
        instance = FormInstance(definition, {}, None, evaluator=CallableEvaluator())
        field = instance.get_field("secret")
        instance.set_model_value("secret", "x", field)

        writes = []
        original = instance.set_model_value

        def spy(tag, value, f):
            writes.append((tag, value))
            original(tag, value, f)

        monkeypatch.setattr(instance, "set_model_value", spy)

        instance.evaluate_show_condition(field, "secret")
        instance.evaluate_show_condition(field, "secret")

        assert writes == [("secret", None)]

    def test_empty_string_counts_as_cleared(self, monkeypatch):
        definition = single_subsection_definition({
            "secret": {"type": "STRING", "showCondition": lambda inst: False},
        })
        instance = FormInstance(definition, {}, None, evaluator=CallableEvaluator())
        field = instance.get_field("secret")
        instance.set_model_value("secret", "", field)

        writes = []
        monkeypatch.setattr(instance, "set_model_value", lambda *args: writes.append(args))

        assert instance.evaluate_show_condition(field, "secret") is False
        assert writes == []
