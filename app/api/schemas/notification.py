from pydantic import BaseModel


class NotificationOut(BaseModel):
    level: str
    message: str
    created_at: str
