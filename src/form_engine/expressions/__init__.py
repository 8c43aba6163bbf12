from form_engine.expressions.evaluator import (
    CALC_OPERATIONS,
    IExpressionEvaluator,
    JsonLogicExpressionEvaluator,
)

__all__ = [
    "CALC_OPERATIONS",
    "IExpressionEvaluator",
    "JsonLogicExpressionEvaluator",
]
