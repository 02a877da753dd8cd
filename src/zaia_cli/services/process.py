"""Process inspection and cancellation."""

from __future__ import annotations

from typing import Any

from zaia_cli.errors import PROCESS_ALREADY_TERMINAL, PROCESS_NOT_FOUND, PlatformError, ZaiaError
from zaia_cli.output import STATUS_CANCELED, ProcessOutput, is_terminal, process_to_output
from zaia_cli.ports import PlatformPort


def get_process(client: PlatformPort, process_id: str) -> ProcessOutput:
    """Fetch one process in its public shape."""
    try:
        process = client.get_process(process_id)
    except PlatformError as e:
        if e.code == PROCESS_NOT_FOUND:
            raise ZaiaError(
                PROCESS_NOT_FOUND,
                f"Process '{process_id}' not found",
                "Check process ID",
                {"processId": process_id},
            ) from e
        raise
    return process_to_output(process)


def cancel_process(client: PlatformPort, process_id: str) -> dict[str, Any]:
    """Cancel a running process.

    Terminal processes are rejected without calling cancel. The reported
    status is always CANCELED: cancellation is accepted, not yet finished.

    Raises:
        ZaiaError: PROCESS_ALREADY_TERMINAL for a finished, failed or canceled process
    """
    current = get_process(client, process_id)
    if is_terminal(current.status):
        raise ZaiaError(
            PROCESS_ALREADY_TERMINAL,
            f"Process is already in terminal state: {current.status}",
            f"Process {process_id} has already completed",
            {"processId": process_id, "status": current.status},
        )

    canceled = process_to_output(client.cancel_process(process_id), action_name=current.action_name)
    result = canceled.model_copy(update={"status": STATUS_CANCELED}).to_dict()
    result["message"] = "Process canceled successfully"
    return result
