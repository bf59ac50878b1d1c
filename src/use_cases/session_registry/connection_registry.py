"""
Registry of live transport connections and the identities logged in on them.

Keeps two dictionaries (handle -> identity and identity -> handle) that are
only ever changed together by register/unregister, plus the set of attached
connections used as the broadcast fan-out set.
"""

from typing import Dict, List, Optional, Set

from tools.errors import HandleAlreadyBoundError, IdentityTakenError


class ConnectionRegistry:
    """
    Bidirectional index between connection handles and identities.

    At most one live handle maps to a given identity, and the index holds
    exactly the set of currently logged-in users.
    """

    def __init__(self):
        self._identity_by_handle: Dict[str, str] = {}
        self._handle_by_identity: Dict[str, str] = {}
        self._connections: Set[str] = set()

    def attach(self, handle: str) -> None:
        """Track a newly opened transport connection."""
        self._connections.add(handle)

    def detach(self, handle: str) -> Optional[str]:
        """
        Forget a closed transport connection.

        Returns:
            The identity that was logged in on it, or None
        """
        self._connections.discard(handle)
        return self.unregister(handle)

    def register(self, handle: str, identity: str) -> None:
        """
        Bind an identity to a connection handle.

        Raises:
            IdentityTakenError: identity is bound to a different live handle
            HandleAlreadyBoundError: handle is already logged in as someone else
        """
        owner = self._handle_by_identity.get(identity)
        if owner is not None and owner != handle:
            raise IdentityTakenError(
                f"Identity {identity} is already in use", {"identity": identity}
            )

        current = self._identity_by_handle.get(handle)
        if current is not None and current != identity:
            raise HandleAlreadyBoundError(
                f"Connection is already logged in as {current}",
                {"identity": current},
            )

        self._connections.add(handle)
        self._identity_by_handle[handle] = identity
        self._handle_by_identity[identity] = handle

    def unregister(self, handle: str) -> Optional[str]:
        """Remove the binding for a handle and return the identity it carried."""
        identity = self._identity_by_handle.pop(handle, None)
        if identity is not None:
            self._handle_by_identity.pop(identity, None)
        return identity

    def handle_for(self, identity: str) -> Optional[str]:
        return self._handle_by_identity.get(identity)

    def identity_for(self, handle: str) -> Optional[str]:
        return self._identity_by_handle.get(handle)

    def is_online(self, identity: str) -> bool:
        return identity in self._handle_by_identity

    def connections(self) -> List[str]:
        """Snapshot of every attached connection, logged in or not."""
        return list(self._connections)

    def identities(self) -> List[str]:
        """Snapshot of every logged-in identity."""
        return list(self._handle_by_identity)

    def __len__(self):
        return len(self._identity_by_handle)
