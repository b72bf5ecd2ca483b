from pydantic import BaseModel


class ErrorInnerModel(BaseModel):
    details: list[str]
    message: str


class ErrorModel(BaseModel):
    error: ErrorInnerModel
