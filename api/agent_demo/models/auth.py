from pydantic import BaseModel, Field


class AdminLoginRequest(BaseModel):
    """Request model for admin login."""

    api_key: str = Field(min_length=1, description="Admin API key for authentication")


class AdminLoginResponse(BaseModel):
    """Response model for admin login and logout."""

    message: str = Field(description="Login result message")
    authenticated: bool = Field(description="Authentication status")
