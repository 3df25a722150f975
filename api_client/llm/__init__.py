from api_client.llm.client import StructuredLLM, create_chat_model

__all__ = ["StructuredLLM", "create_chat_model"]
