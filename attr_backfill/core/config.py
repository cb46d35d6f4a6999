from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import List, Optional


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "attr-backfill"
    environment: str = Field(default="dev", validation_alias="ENVIRONMENT")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    # AWS / DynamoDB
    aws_region: str = Field(default="us-east-1", validation_alias="AWS_REGION")
    dynamodb_endpoint_url: Optional[str] = Field(default=None, validation_alias="DYNAMODB_ENDPOINT_URL")
    dynamodb_table: str = Field(default="AgentEndpoint", validation_alias="DYNAMODB_TABLE")

    # Backfill target
    missing_attribute: str = Field(default="AccountId", validation_alias="MISSING_ATTRIBUTE")
    target_attribute: str = Field(default="AccountId", validation_alias="TARGET_ATTRIBUTE")
    # PK, SK. Must match the table's key schema; read from env as a JSON list.
    key_attributes: List[str] = Field(default=["AgentArn", "EndpointName"], validation_alias="KEY_ATTRIBUTES")
    source_attribute: str = Field(default="AgentArn", validation_alias="SOURCE_ATTRIBUTE")

    # Paging / pacing
    first_page_limit: int = Field(default=50, ge=1, validation_alias="FIRST_PAGE_LIMIT")
    page_limit: int = Field(default=100, ge=1, validation_alias="PAGE_LIMIT")
    update_concurrency: int = Field(default=1, ge=1, validation_alias="UPDATE_CONCURRENCY")
    page_delay_seconds: float = Field(default=0.0, ge=0, validation_alias="PAGE_DELAY_SECONDS")


settings = Settings()  # type: ignore
