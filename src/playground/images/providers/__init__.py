from .openai import OpenAIImageGateway

__all__ = ["OpenAIImageGateway"]
