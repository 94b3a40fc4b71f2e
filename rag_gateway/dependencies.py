"""Global dependencies for the application."""

from fastapi import Request

from rag_gateway.gateway import RAGGateway


async def get_gateway(request: Request) -> RAGGateway:
    """Dependency to get the gateway built in the app lifespan.
    
    Args:
        request: The FastAPI request object.
        
    Returns:
        The process-wide RAGGateway instance.
    """
    return request.app.state.gateway
