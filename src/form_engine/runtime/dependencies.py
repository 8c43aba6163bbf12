"""
Dependency Engine - recomputation cascades driven by a definition's trigger maps.

Two maps drive two cascades:

calcTriggerMap (field id -> tags): when a calc field changes, every listed tag
is recomputed from its calcExpressionMap entry, e.g.

    {"0e25b3f7-74d5-46ce-b4d6-73d00c6a09af": ["totalScore"]}

defaultValueTriggerMap (tag -> tags): when a tag's value changes, the default
value conditions of every listed tag are re-run, e.g.

    {"totalScore": ["totalScoreRadio"]}

Each recomputed calc tag immediately runs its own default-value cascade.
Cascades are plain synchronous recursion and are not deduplicated; trigger
maps are expected to be acyclic (see find_trigger_cycle).
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from form_engine.expressions.evaluator import IExpressionEvaluator
from form_engine.fields import DataType, Field

logger = logging.getLogger(__name__)


class DependencyEngine:
    """Runs calculation and default-value cascades against a form instance."""

    def __init__(self, instance: Any, evaluator: IExpressionEvaluator):
        self.instance = instance
        self.evaluator = evaluator

    def calculate_fields(self, field: Field) -> None:
        """
        Recompute every tag that depends on a calc field.

        Args:
            field: The field whose value just changed
        """
        if not field.calc:
            return

        tags = (self.instance.get_calc_trigger_map() or {}).get(field.id) or []
        for tag in tags:
            expression = self.instance.get_calc_expression_by_tag(tag)
            if not expression:
                logger.warning(f"No calc expression for '{tag}' (triggered by '{field.tag}')")
                continue

            value = self.evaluator.eval_expression(expression, self.instance)
            logger.debug(f"Calculated '{tag}' = {value!r} (triggered by '{field.tag}')")
            self.instance.set_model_value(tag, value, self.instance.get_field(tag))
            self.trigger_default_value_evaluation(tag)

    def trigger_default_value_evaluation(self, tag: str) -> None:
        """Re-run default values of every tag that depends on ``tag``."""
        tags = (self.instance.get_default_value_trigger_map() or {}).get(tag)
        if tags:
            self.evaluate_default_value_conditions(tags)

    def evaluate_default_value_conditions(self, tags: Iterable[str]) -> None:
        """
        Apply default value conditions to each tag in order.

        Every condition whose guard holds writes its value, so the last
        matching condition wins. Array fields merge the candidate into their
        current value through the field's component, exactly as a user
        selecting that choice would.
        """
        for tag in tags:
            field = self.instance.get_field(tag)
            for conditional in resolve_default_value_conditions(field):
                if not self.evaluator.eval_condition(conditional.get("condition"), self.instance):
                    continue

                default_value = self.evaluator.eval_expression(
                    conditional.get("expression"), self.instance
                )
                if field.type == DataType.ARRAY:
                    default_value = field.component.on_update(
                        field, self.instance.get_model_value(tag), default_value
                    )

                logger.debug(f"Default value for '{tag}' = {default_value!r}")
                self.instance.set_model_value(tag, default_value, field)


def resolve_default_value_conditions(field: Field) -> List[Mapping[str, Any]]:
    """The field's own conditions, else the flattened conditions of its options."""
    if field.default_value_conditions:
        return list(field.default_value_conditions)

    conditions: List[Mapping[str, Any]] = []
    for option in field.options or []:
        conditions.extend(option.default_value_conditions or [])
    return conditions


def _dependency_graph(definition: Mapping[str, Any], fields: Mapping[str, Field]) -> Dict[str, List[str]]:
    """Edges tag -> dependent tags across both trigger maps."""
    graph: Dict[str, List[str]] = {}
    tags_by_id = {f.id: tag for tag, f in fields.items() if f.id is not None and f.calc}

    for field_id, tags in (definition.get("calcTriggerMap") or {}).items():
        source = tags_by_id.get(field_id, field_id)
        graph.setdefault(source, []).extend(tags or [])

    for tag, tags in (definition.get("defaultValueTriggerMap") or {}).items():
        graph.setdefault(tag, []).extend(tags or [])

    return graph


def find_trigger_cycle(definition: Mapping[str, Any], fields: Mapping[str, Field]) -> Optional[List[str]]:
    """
    Find a cycle in the combined trigger graph.

    Calc edges only continue a chain into a default-value edge, but a cyclic
    configuration is a configuration error either way, so both maps are
    treated as one graph.

    Returns:
        The tags along the cycle (first tag repeated at the end), or None
    """
    graph = _dependency_graph(definition, fields)
    visiting: List[str] = []
    done = set()

    def visit(node: str) -> Optional[List[str]]:
        if node in visiting:
            return visiting[visiting.index(node):] + [node]
        if node in done:
            return None
        visiting.append(node)
        for dependent in graph.get(node, []):
            cycle = visit(dependent)
            if cycle:
                return cycle
        visiting.pop()
        done.add(node)
        return None

    for start in list(graph):
        cycle = visit(start)
        if cycle:
            return cycle
    return None
