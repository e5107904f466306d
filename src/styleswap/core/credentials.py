"""Credential gate: blocks the workflow until an API key is selected.

The gate is a two-state machine:

    Blocked (needs_credential=True) --request_selection()--> Unblocked
    Unblocked --reopen()--> Blocked

The initial state comes from a single query to the host's credential
capability at startup. The capability is optional; a host that does not
provide it leaves the gate open so the UI can never deadlock on it.

Accepted limitation
-------------------
``request_selection()`` clears the flag as soon as the host's selection flow
returns, whatever the user did in it. A cancelled selection therefore unblocks
the UI; the next generation then fails with a credential error and the gate
reopens.
"""

import logging
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class CredentialHost(Protocol):
    """Host capability for choosing the API credential."""

    async def has_selected_credential(self) -> bool: ...

    async def open_selection_flow(self) -> None: ...


class CredentialGate:
    """Owns the process-wide ``needs_credential`` flag.

    Args:
        host: Credential capability of the host, or None if it has none
    """

    def __init__(self, host: CredentialHost | None = None):
        self.host = host
        self._needs_credential = False

    @property
    def needs_credential(self) -> bool:
        return self._needs_credential

    @property
    def is_blocked(self) -> bool:
        return self._needs_credential

    async def check_initial(self) -> bool:
        """Query the host once and set the initial gate state.

        Returns:
            The resulting ``needs_credential`` value
        """
        query = getattr(self.host, "has_selected_credential", None)
        if query is None:
            logger.info("Host has no credential capability; credential gate open")
            self._needs_credential = False
            return False

        has_credential = await query()
        self._needs_credential = not has_credential
        logger.info(f"Initial credential check: needs_credential={self._needs_credential}")
        return self._needs_credential

    async def request_selection(self) -> None:
        """Run the host's selection flow, then unblock optimistically."""
        flow = getattr(self.host, "open_selection_flow", None)
        if flow is not None:
            await flow()

        self._needs_credential = False
        logger.info("Credential selection finished; credential gate open")

    def reopen(self) -> None:
        """Block the workflow again after a credential failure."""
        self._needs_credential = True
        logger.warning("Credential gate reopened: API key must be selected again")


class ApiKeyStore:
    """Credential host backed by an in-process Gemini API key.

    The UI stages the key the user typed with :meth:`stage_key`; the
    selection flow commits it. Running the flow with nothing staged keeps the
    current key, which is the cancel case.

    Args:
        api_key: Initial key, usually from configuration
    """

    def __init__(self, api_key: str | None = None):
        self._api_key = api_key or None
        self._staged: str | None = None

    @property
    def api_key(self) -> str | None:
        return self._api_key

    def stage_key(self, api_key: str | None) -> None:
        """Remember a key to be committed by the next selection flow."""
        self._staged = (api_key or "").strip() or None

    async def has_selected_credential(self) -> bool:
        return bool(self._api_key)

    async def open_selection_flow(self) -> None:
        if self._staged is None:
            logger.info("Credential selection cancelled; keeping current key")
            return

        self._api_key = self._staged
        self._staged = None
        logger.info("New API key selected")
