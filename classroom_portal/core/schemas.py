from pydantic import BaseModel


class Pagination(BaseModel):
    total: int
    page: int
    pages: int
    limit: int


class MessageResponse(BaseModel):
    message: str
