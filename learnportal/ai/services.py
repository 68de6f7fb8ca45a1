"""
Chat-completion proxy
Forwards a student message to Cerebras and relays the first reply
"""

import asyncio
import json
import logging

from cerebras.cloud.sdk import Cerebras

from learnportal.ai.prompts import SERVICE_ERROR, TUTOR_SYSTEM
from learnportal.errors import ExternalServiceError
from learnportal.store import PortalStore

logger = logging.getLogger(__name__)


class CerebrasChatClient:
    """Narrow wrapper so the proxy only depends on `complete(system, user)`"""

    def __init__(self, api_key: str, model: str):
        self.model = model
        self._client = Cerebras(api_key=api_key)

    def complete(self, system: str, user: str) -> str:
        response = self._client.chat.completions.create(
            model=self.model,
            stream=False,
            messages=[
                {"role": "system", "content": system},
                {"role": "user",   "content": user},
            ],
        )
        return response.choices[0].message.content or ""


def get_ai_client(store: PortalStore):
    if store.ai_client is None:
        store.ai_client = CerebrasChatClient(store.config.ai_api_key, store.config.ai_model)
    return store.ai_client


async def ask_ai(store: PortalStore, message) -> dict:
    if message is None:
        text = ""
    elif isinstance(message, str):
        text = message
    else:
        text = json.dumps(message)
    try:
        client = get_ai_client(store)
        reply = await asyncio.to_thread(client.complete, TUTOR_SYSTEM, text)
    except Exception as e:
        logger.error("Chat completion failed: %s", e)
        await store.ai_log.append(text)
        raise ExternalServiceError(SERVICE_ERROR)

    return {"success": True, "reply": reply}
