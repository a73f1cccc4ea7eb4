"""Run the application lifespan through FastAPI's dependency solver.

Startup collaborators (Redis client, session store, broadcaster, rate
limiter, orchestrator) are async-generator dependencies.  Decorating the
lifespan with ``inject`` resolves them once at startup, in dependency
order, and unwinds them in reverse on shutdown.  Overrides registered in
``app.dependency_overrides`` apply here as they do for routes.

Adapted from https://github.com/fastapi/fastapi/discussions/11742
"""

from contextlib import AsyncExitStack, asynccontextmanager
from functools import partial
from typing import Any, AsyncIterator, Callable

from fastapi import FastAPI, Request
from fastapi.dependencies.utils import get_dependant, solve_dependencies

_LIFESPAN_ADDRESS = ("localhost", 80)


def get_app(request: Request) -> FastAPI:
    """Dependency returning the running application."""
    return request.app


def _startup_request(app: FastAPI) -> Request:
    # solve_dependencies needs a request; nothing reads more than app/state.
    return Request(
        scope={
            "type": "http",
            "http_version": "1.1",
            "method": "GET",
            "scheme": "http",
            "path": "/",
            "raw_path": b"/",
            "root_path": "",
            "query_string": b"",
            "headers": [],
            "client": _LIFESPAN_ADDRESS,
            "server": _LIFESPAN_ADDRESS,
            "app": app,
            "state": app.state,
        }
    )


def inject(lifespan: Callable[..., Any]) -> Callable[[FastAPI], Any]:
    """Turn a lifespan with ``Depends()`` parameters into a plain one.

    ::

        @inject
        async def lifespan(
            app: FastAPI,
            _orchestrator: Annotated[None, Depends(build_orchestrator)],
        ):
            yield
    """
    body = asynccontextmanager(lifespan)

    @asynccontextmanager
    async def run(app: FastAPI) -> AsyncIterator[None]:
        dependant = get_dependant(path="/", call=partial(lifespan, app))
        async with AsyncExitStack() as teardown:
            solved = await solve_dependencies(
                request=_startup_request(app),
                dependant=dependant,
                async_exit_stack=teardown,
                embed_body_fields=False,
                dependency_overrides_provider=app,
            )
            async with body(app, **solved.values):
                yield

    return run
