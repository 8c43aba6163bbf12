"""
Pytest fixtures and configuration for form engine tests.
Provides sample definitions and opaque stand-ins for the collaborators.
"""

import pytest

from form_engine.runtime.instance import FormInstance
from tests.fixtures.form_fixtures import CallableEvaluator, build_definition


@pytest.fixture
def definition():
    """Fresh copy of the sample definition."""
    return build_definition()


@pytest.fixture
def instance(definition):
    """Instance of the sample definition with an empty model."""
    return FormInstance(definition, {})


@pytest.fixture
def callable_evaluator():
    return CallableEvaluator()
