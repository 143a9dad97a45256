"""Shared fixtures for the tutor tests."""

import pytest

from stubs import StubHandler
from tutorverse.agents.tutor_agent import TutorAgent
from tutorverse.models.schemas import MathSolution, PhysicsAnswer, Subject


@pytest.fixture
def math_handler():
    return StubHandler(payload=MathSolution(solution="30"))


@pytest.fixture
def physics_handler():
    return StubHandler(payload=PhysicsAnswer(answer="About 3e8 m/s.", constants_used=["speedOfLight"]))


@pytest.fixture
def make_agent(math_handler, physics_handler):
    def _make(router):
        return TutorAgent(
            router=router,
            handlers={Subject.MATH: math_handler, Subject.PHYSICS: physics_handler},
        )
    return _make
