"""
Expression evaluation for show conditions, default values and calculations.

The engine depends only on the IExpressionEvaluator abstraction. The default
implementation runs JSON Logic rules against the instance's flat model and
understands the calculation specs stored in a definition's calcExpressionMap:

    "totalScore": {
        "type": "ADD",
        "expressions": [
            {"type": "FORM_RESPONSE", "tag": "ageGroup"},
            {"type": "FORM_RESPONSE", "tag": "gender"},
            {"type": "CONSTANT", "value": 2}
        ]
    }
"""

import logging
import operator
from abc import ABC, abstractmethod
from functools import reduce
from typing import Any, Callable, Dict, List

try:
    from json_logic import jsonLogic
except ImportError:
    raise ImportError(
        "json-logic library not found. Install with: pip install json-logic"
    )

from form_engine.fields import is_blank

logger = logging.getLogger(__name__)


def _number(value: Any) -> Any:
    """Coerce a model value to a number; blank counts as 0, junk as NaN."""
    if is_blank(value):
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, (list, tuple, set)):
        return sum(_number(v) for v in value)
    try:
        text = str(value).strip()
        return int(text) if text.lstrip("+-").isdigit() else float(text)
    except ValueError:
        return float("nan")


CALC_OPERATIONS: Dict[str, Callable[[List[Any]], Any]] = {
    "ADD": lambda values: sum(values),
    "SUBTRACT": lambda values: reduce(operator.sub, values) if values else 0,
    "MULTIPLY": lambda values: reduce(operator.mul, values, 1),
    # A zero divisor (including a blank operand, coerced to 0) raises ZeroDivisionError
    "DIVIDE": lambda values: reduce(operator.truediv, values) if values else 0,
    "MIN": lambda values: min(values) if values else 0,
    "MAX": lambda values: max(values) if values else 0,
}


class IExpressionEvaluator(ABC):
    """
    Abstract interface for expression evaluation.

    The instance is passed so expressions can read any field's current value.
    """

    @abstractmethod
    def eval_condition(self, expression: Any, instance: Any) -> bool:
        """Evaluate a boolean guard (show condition, default-value condition)."""
        pass

    @abstractmethod
    def eval_expression(self, expression: Any, instance: Any) -> Any:
        """Evaluate an expression to a value (calculation, default value)."""
        pass


class JsonLogicExpressionEvaluator(IExpressionEvaluator):
    """Concrete implementation using the json-logic library."""

    def eval_condition(self, expression: Any, instance: Any) -> bool:
        return bool(self.eval_expression(expression, instance))

    def eval_expression(self, expression: Any, instance: Any) -> Any:
        if self._is_calc_spec(expression):
            return self._eval_calc(expression, instance)

        if isinstance(expression, dict):
            return jsonLogic(expression, instance.get_expression_data())

        # Literals evaluate to themselves
        return expression

    def _is_calc_spec(self, expression: Any) -> bool:
        return (
            isinstance(expression, dict)
            and str(expression.get("type", "")).upper() in CALC_OPERATIONS
            and "expressions" in expression
        )

    def _eval_calc(self, spec: Dict[str, Any], instance: Any) -> Any:
        operation = CALC_OPERATIONS[str(spec["type"]).upper()]
        values = [self._eval_operand(operand, instance) for operand in spec.get("expressions") or []]
        result = operation(values)
        logger.debug(f"Calc {spec['type']} over {values} = {result}")
        return result

    def _eval_operand(self, operand: Any, instance: Any) -> Any:
        if not isinstance(operand, dict):
            return _number(operand)

        operand_type = str(operand.get("type", "")).upper()
        if operand_type == "FORM_RESPONSE":
            return _number(instance.get_model_value(operand["tag"]))
        if operand_type == "CONSTANT":
            return _number(operand.get("value"))
        if operand_type == "LOGIC":
            return _number(jsonLogic(operand["rule"], instance.get_expression_data()))
        if self._is_calc_spec(operand):
            return self._eval_calc(operand, instance)

        return _number(jsonLogic(operand, instance.get_expression_data()))
