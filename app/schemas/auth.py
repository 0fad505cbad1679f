from pydantic import BaseModel, ConfigDict, Field


class AccessTokenResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    access_token: str = Field(alias="accessToken")


class TokenData(BaseModel):
    email: str
