"""Route-level dependency aliases.

Tests swap the orchestrator through ``app.state.orchestrator`` or
``app.dependency_overrides[get_orchestrator]``.
"""

from typing import Annotated

from fastapi import Depends

from flybus.core.service.deps import get_orchestrator
from flybus.core.service.orchestrator import DialogueOrchestrator

OrchestratorDep = Annotated[DialogueOrchestrator, Depends(get_orchestrator)]
