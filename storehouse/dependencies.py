from fastapi import Request
from storehouse.services.warehouse import Warehouse


def get_warehouse(request: Request):
    """Per-request Warehouse over the storage backend the app was created with."""
    state = request.app.state
    with state.storage_provider.open() as storage:
        yield Warehouse(
            storage,
            log_plain_kanban_edits=state.log_plain_kanban_edits,
            clock=state.clock
        )
