from fastapi import FastAPI, HTTPException, Request
import json
import os
import time
import uuid

app = FastAPI(title="Mock LLM Server", version="1.0.0")
# MOCK_LLM_MODE: echo (return the base letter) | garbage (schema-invalid text) | error (HTTP 500)
MODE = os.getenv("MOCK_LLM_MODE", "echo")
BASE_LETTER_MARKER = "【元のレター】"


def extract_base_letter(prompt: str) -> str:
    if BASE_LETTER_MARKER not in prompt:
        return ""
    body = prompt.split(BASE_LETTER_MARKER, 1)[1].strip()
    return body.split("\n\n", 1)[0].strip()


@app.get("/health")
def health():
    return {"status": "ok", "mode": MODE}


@app.post("/v1/chat/completions")
async def chat_completions(request: Request):
    payload = await request.json()
    if MODE == "error":
        raise HTTPException(status_code=500, detail="mock upstream failure")

    user_messages = [m.get("content", "") for m in payload.get("messages", []) if m.get("role") == "user"]
    letter = extract_base_letter(user_messages[-1] if user_messages else "")
    content = "not json" if MODE == "garbage" else json.dumps({"letter": letter}, ensure_ascii=False)

    return {
        "id": f"chatcmpl-{uuid.uuid4().hex}",
        "object": "chat.completion",
        "created": int(time.time()),
        "model": payload.get("model", "mock"),
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
        "usage": {"prompt_tokens": 0, "completion_tokens": 0, "total_tokens": 0},
    }
