"""
Admin routes package for the Agent Demo API.

This package organizes admin routes by resource:
- auth: Authentication (login, logout)
- domains: Domain CRUD
- agents: Agent CRUD and publishing
- questions: Question CRUD, variant regeneration/approval, preview, audit trail
"""

from agent_demo.routes.admin import agents, auth, domains, questions
from fastapi import FastAPI


def include_admin_routers(app: FastAPI) -> None:
    """Include all admin routers in the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    # Authentication router has no auth dependency (login/logout)
    app.include_router(auth.router)

    app.include_router(domains.router)
    app.include_router(agents.router)
    app.include_router(questions.router)


__all__ = [
    "agents",
    "auth",
    "domains",
    "include_admin_routers",
    "questions",
]
