from pydantic import BaseModel


class Group(BaseModel):
    id: int
    name: str

    model_config = {"frozen": True, "extra": "ignore"}
