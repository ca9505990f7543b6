from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request

from mock_api.data_seed import generate_seed

app = FastAPI()
seed = generate_seed()

app.state.seed = seed
app.state.metrics = {
    "getSignaturesForAddress": 0,
    "getTransaction": 0,
    "getMultipleAccounts": 0,
    "http_requests": 0,
}


def reset_metrics() -> None:
    app.state.metrics = {
        "getSignaturesForAddress": 0,
        "getTransaction": 0,
        "getMultipleAccounts": 0,
        "http_requests": 0,
    }


def _options(params: List[Any], index: int) -> Dict[str, Any]:
    if len(params) > index and isinstance(params[index], dict):
        return params[index]
    return {}


def _signatures_for_address(params: List[Any]) -> List[Dict[str, Any]]:
    address = params[0]
    options = _options(params, 1)
    if address != app.state.seed["address"]:
        return []
    history = app.state.seed["signatures"]
    start = 0
    before = options.get("before")
    if before is not None:
        positions = [i for i, record in enumerate(history) if record["signature"] == before]
        if not positions:
            return []
        start = positions[0] + 1
    limit = int(options.get("limit", 1000))
    return history[start : start + limit]


def _transaction(params: List[Any]) -> Optional[Dict[str, Any]]:
    return app.state.seed["transactions"].get(params[0])


def _multiple_accounts(params: List[Any]) -> Dict[str, Any]:
    accounts = app.state.seed["accounts"]
    return {"context": {"slot": 300_000_001}, "value": [accounts.get(key) for key in params[0]]}


HANDLERS = {
    "getSignaturesForAddress": _signatures_for_address,
    "getTransaction": _transaction,
    "getMultipleAccounts": _multiple_accounts,
}


def _dispatch(call: Dict[str, Any]) -> Dict[str, Any]:
    method = call.get("method")
    handler = HANDLERS.get(method)
    if handler is None:
        return {
            "jsonrpc": "2.0",
            "id": call.get("id"),
            "error": {"code": -32601, "message": f"Method not found: {method}"},
        }
    app.state.metrics[method] += 1
    return {"jsonrpc": "2.0", "id": call.get("id"), "result": handler(call.get("params") or [])}


@app.post("/", response_model=None)
async def json_rpc(request: Request) -> Any:
    app.state.metrics["http_requests"] += 1
    body = await request.json()
    if isinstance(body, list):
        return [_dispatch(call) for call in body]
    return _dispatch(body)
