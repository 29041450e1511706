from .openai import OpenAICompletionGateway

__all__ = ["OpenAICompletionGateway"]
