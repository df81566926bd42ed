"""API routes"""
from fastapi import APIRouter
from fastapi.responses import PlainTextResponse


def create_api_router() -> APIRouter:
    """Build the router mounted under the API prefix"""
    router = APIRouter()

    @router.get('/health', response_class=PlainTextResponse)
    def health_check():
        """Health check endpoint"""
        return PlainTextResponse("✅ Server is healthy!", status_code=200)

    return router
