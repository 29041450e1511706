from .openai import OpenAITranscriptionGateway

__all__ = ["OpenAITranscriptionGateway"]
