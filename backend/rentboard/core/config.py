from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file='.env', env_file_encoding='utf-8', extra='ignore')

    app_name: str = 'rentboard'
    app_env: str = Field(default='dev', alias='APP_ENV')
    app_port: int = Field(default=8000, alias='APP_PORT')

    cors_origins: str = Field(default='*', alias='CORS_ORIGINS')

    rpc_base_url: str = Field(default='', alias='RPC_BASE_URL')
    rpc_api_key: str = Field(default='', alias='RPC_API_KEY')

    top_tenants_limit: int = Field(default=8, alias='TOP_TENANTS_LIMIT')
    expiry_years_ahead: int = Field(default=10, alias='EXPIRY_YEARS_AHEAD')
    upcoming_expiries_limit: int = Field(default=50, alias='UPCOMING_EXPIRIES_LIMIT')
    top_debtors_limit: int = Field(default=8, alias='TOP_DEBTORS_LIMIT')
    receivables_list_limit: int = Field(default=100, alias='RECEIVABLES_LIST_LIMIT')


settings = Settings()
