"""Base exception for the RAG gateway."""


class RAGGatewayError(Exception):
    """Base exception for all RAG gateway errors."""
    
    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)
