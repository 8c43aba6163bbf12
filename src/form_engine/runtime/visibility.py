"""Visibility Evaluator - show conditions and the clearing of hidden answers."""

import logging
from typing import Any

from form_engine.expressions.evaluator import IExpressionEvaluator
from form_engine.fields import Field, is_blank

logger = logging.getLogger(__name__)


class VisibilityEvaluator:
    def __init__(self, instance: Any, evaluator: IExpressionEvaluator):
        self.instance = instance
        self.evaluator = evaluator

    def is_visible(self, field: Field) -> bool:
        """Show-condition check without side effects."""
        if not field.show_condition:
            return True
        return bool(self.evaluator.eval_condition(field.show_condition, self.instance))

    def evaluate_show_condition(self, field: Field, tag: str) -> bool:
        """
        Evaluate a field's show condition, clearing the field when hidden.

        Hidden fields cannot keep stale answers. Re-evaluating a hidden field
        that is already cleared writes nothing.

        Args:
            field: Decorated field
            tag: The field's tag

        Returns:
            True when the field should be shown
        """
        show_field = self.is_visible(field)
        if not show_field and not is_blank(self.instance.get_model_value(tag)):
            logger.debug(f"Clearing hidden field '{tag}'")
            self.instance.set_model_value(tag, None, field)
        return show_field
