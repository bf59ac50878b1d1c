from .router import SignalingRouter, PEER_DISCONNECTED_REASON

__all__ = ["SignalingRouter", "PEER_DISCONNECTED_REASON"]
