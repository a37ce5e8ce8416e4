"""Action-only controller: no Ping model exists."""

from restmap.core.domain_types import ActionRequest
from restmap.services.controller import Controller


class PingController(Controller):

    async def ping(self, request: ActionRequest) -> dict:
        return {"pong": True, "query": request.query}
