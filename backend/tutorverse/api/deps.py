from fastapi import Request

from tutorverse.agents.tutor_agent import TutorAgent


def get_tutor_agent(request: Request) -> TutorAgent:
    """The TutorAgent created at startup, built on demand if startup was skipped"""
    agent = getattr(request.app.state, "tutor_agent", None)
    if agent is None:
        agent = TutorAgent()
        request.app.state.tutor_agent = agent
    return agent
