from pydantic import BaseModel
import math

class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int

def build_pagination(page: int, limit: int, total: int) -> Pagination:
    return Pagination(page=page, limit=limit, total=total, pages=math.ceil(total / limit) if limit else 0)

class MessageResponse(BaseModel):
    message: str
