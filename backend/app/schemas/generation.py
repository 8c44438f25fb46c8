from pydantic import Field

from app.schemas.pitch_deck import CamelModel, StartupIdea

DEFAULT_COMPANY_NAME = "[Your Company Name]"


class EvaluateResponseRequest(CamelModel):
    user_response: str = Field(min_length=1)


class GenerateDeckRequest(CamelModel):
    company_name: str = DEFAULT_COMPANY_NAME
    idea: StartupIdea = Field(default_factory=StartupIdea)


class PrinciplesSearchRequest(CamelModel):
    query: str = Field(min_length=1)


class ShouldGenerateRequest(CamelModel):
    user_message: str
