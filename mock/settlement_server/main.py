"""
Mock settlement collaborator for local development only.

Keeps the most recent events in memory so they can be inspected by hand;
nothing is persisted.
"""

from collections import deque
from typing import Any, Deque, Dict

from fastapi import FastAPI, HTTPException

app = FastAPI(title="Mock Settlement Server", version="1.0.0")
MAX_EVENTS = 1000
# Newest last; oldest dropped past MAX_EVENTS
RECEIVED: Deque[Dict[str, Any]] = deque(maxlen=MAX_EVENTS)
KNOWN_EVENTS = {"INVOICE_FACTORED", "PO_FINANCED", "INVENTORY_FINANCING_ACTIVATED"}

@app.get("/health")
def health(): return {"status": "ok"}

@app.post("/mock-settlement")
def settle(payload: Dict[str, Any]):
    if payload.get("event") not in KNOWN_EVENTS:
        raise HTTPException(status_code=422, detail="unknown event")
    RECEIVED.append(payload)
    return {"status": "accepted", "received": len(RECEIVED)}

@app.get("/mock-settlement/events")
def events(): return {"events": list(RECEIVED)}
