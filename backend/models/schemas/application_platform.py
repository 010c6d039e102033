"""ApplicationPlatform: a job board suggested alongside a job match."""

from pydantic import BaseModel


class ApplicationPlatform(BaseModel):
    name: str
    url: str
    description: str = ""
