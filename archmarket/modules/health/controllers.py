"""
Health module controllers.
"""

from archmarket.controller import GET, Controller, RequestCtx


class HealthController(Controller):
    prefix = "/health"
    tags = ["health"]

    @GET("/")
    async def health(self, ctx: RequestCtx):
        return {"status": "OK", "message": "Architecture Design Portal API is running"}
