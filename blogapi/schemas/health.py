from pydantic import BaseModel, Field


class HealthCheckResponse(BaseModel):
    version: str = Field(..., description="API version")
    status: str = Field(..., description="Service status")
    timestamp: str = Field(..., description="Server time")
    environment: str = Field(..., description="Deployment environment")
