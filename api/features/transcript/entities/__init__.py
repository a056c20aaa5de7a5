from api.features.transcript.entities.feedback import Feedback, Rating
from api.features.transcript.entities.message import Message, MessageRole

__all__ = ["Feedback", "Message", "MessageRole", "Rating"]
