from .user import user
from .event import event
from .comment import comment
from .notification import notification

__all__ = ["user", "event", "comment", "notification"]
