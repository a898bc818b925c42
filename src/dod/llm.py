# src/dod/llm.py
"""
LLM gateway client (OpenAI-compatible).

- get_client() builds the client from API_KEY / BASE_URL in the environment.
- chat_json() sends one system+user exchange and parses the reply as JSON.
- Every call is logged with latency and token usage under "dod.llm".
"""
from __future__ import annotations

import json
import logging
import os
import time
from typing import Any, Dict, Optional

from openai import OpenAI

logger = logging.getLogger("dod.llm")


class GatewayConfigError(RuntimeError):
    pass


def get_client() -> OpenAI:
    # Both values come from .env or the environment, never from .dodrc.json.
    missing = [name for name in ("API_KEY", "BASE_URL") if not os.environ.get(name)]
    if missing:
        raise GatewayConfigError(
            f"{', '.join(missing)} not set: add to .env or the environment to reach the LLM gateway."
        )
    return OpenAI(
        api_key=os.environ["API_KEY"],
        base_url=os.environ["BASE_URL"],
    )


def _usage_dict(usage: Any) -> Optional[Dict[str, int]]:
    """
    Token usage as a plain dict, from either the openai types or a dict.
    None when the gateway did not report usage.
    """
    if usage is None:
        return None

    keys = ("prompt_tokens", "completion_tokens", "total_tokens")
    if all(hasattr(usage, k) for k in keys):
        return {k: int(getattr(usage, k) or 0) for k in keys}
    if isinstance(usage, dict):
        return {k: int(usage.get(k) or 0) for k in keys}
    return None


def _strip_fences(txt: str) -> str:
    # Some models wrap JSON in ```json fences.
    txt = txt.strip()
    if txt.startswith("```"):
        txt = txt.strip("`").strip()
        if txt.lower().startswith("json"):
            txt = txt[4:]
    return txt.strip()


def chat_json(
    model: str,
    system: str,
    user: str,
    temperature: float = 0.2,
    operation: str = "unspecified",
    run_id: Optional[str] = None,
    client: Optional[Any] = None,
) -> Any:
    """
    Call the gateway and return the parsed JSON reply.

    The prompt must ask for JSON only. A reply that is not JSON raises
    json.JSONDecodeError; transport errors from openai propagate unchanged.
    """
    client = client or get_client()

    # Wall-clock latency of the gateway round trip, model time included.
    t0 = time.perf_counter()
    resp = client.chat.completions.create(
        model=model,
        messages=[
            {"role": "system", "content": system},
            {"role": "user", "content": user},
        ],
        temperature=temperature,
    )
    dt_ms = (time.perf_counter() - t0) * 1000.0

    logger.info(
        "llm_call op=%s model=%s latency_ms=%.1f run_id=%s usage=%s",
        operation,
        model,
        dt_ms,
        run_id,
        _usage_dict(getattr(resp, "usage", None)),
    )

    # An empty reply becomes "" and fails json.loads below.
    content = resp.choices[0].message.content or ""
    return json.loads(_strip_fences(content))
