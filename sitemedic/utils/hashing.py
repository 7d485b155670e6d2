import hashlib
import json


def payload_hash(payload) -> str:
    if hasattr(payload, "model_dump"):
        payload = payload.model_dump(mode="json")
    s = json.dumps(payload, sort_keys=True, default=str)
    return hashlib.sha256(s.encode()).hexdigest()


def cache_key(prefix: str, payload) -> str:
    return f"{prefix}:{payload_hash(payload)}"
