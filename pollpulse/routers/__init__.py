from .polls_router import router

__all__ = ["router"]
