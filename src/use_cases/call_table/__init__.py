from .call_table import CallTable, CallRecord, CallStatus, EndedCall

__all__ = ["CallTable", "CallRecord", "CallStatus", "EndedCall"]
