from pydantic import BaseModel, Field
from typing import Optional, Literal

BulletType = Literal['pro', 'con', 'warning']
Rating = Literal['Secure', 'Risky', 'Not secure']

class SummarizeRequest(BaseModel):
    text: str
    language: Optional[Literal['en', 'es']] = None

class Bullet(BaseModel):
    type: BulletType
    text: str = ''

class SummarizeResponse(BaseModel):
    summary: str = ''
    bullets: list[Bullet] = Field(default_factory=list)
    rating: Rating = 'Risky'

class ErrorResponse(BaseModel):
    error: str

class HealthResponse(BaseModel):
    status: str
