from __future__ import annotations
import secrets

def _tok(nbytes: int = 12) -> str:
    return secrets.token_urlsafe(nbytes)

def new_session_id() -> str:
    return f"sess_{_tok()}"

def new_layer_id() -> str:
    return f"lyr_{_tok()}"

def new_handle_id() -> str:
    return f"res_{_tok()}"

def new_artifact_id() -> str:
    return f"art_{_tok()}"
