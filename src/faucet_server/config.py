from __future__ import annotations

import os
from decimal import Decimal
from typing import Any, Dict, Literal, Optional, Tuple, Type, TypedDict

import yaml
from pydantic import BaseModel, Field, SecretStr, computed_field
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)
from web3 import Web3
from web3.types import Wei

__all__ = [
    "Config",
    "LogConfig",
    "EthereumConfig",
    "FaucetConfig",
    "set_data_dir",
    "load_config",
    "TxOption",
    "get_default_tx_option",
]


_data_dir: str = ""
_config_dir: str = "config"


def config_file_path():
    return os.path.join(_data_dir, _config_dir, "config.yml")


class YamlConfigSettingsSource(PydanticBaseSettingsSource):
    """
    A simple settings source class that loads variables from a YAML file

    Note: slightly adapted version of JsonConfigSettingsSource from docs.
    """

    _yaml_data: Dict[str, Any] | None = None

    @property
    def yaml_data(self) -> Dict[str, Any]:
        if self._yaml_data is None:
            yaml_file = config_file_path()
            if os.path.exists(yaml_file):
                with open(yaml_file, mode="r", encoding="utf-8") as f:
                    self._yaml_data = yaml.safe_load(f) or {}
            else:
                self._yaml_data = {}
        return self._yaml_data  # type: ignore

    def get_field_value(
        self, field: FieldInfo, field_name: str
    ) -> Tuple[Any, str, bool]:
        field_value = self.yaml_data.get(field_name)
        return field_value, field_name, False

    def prepare_field_value(
        self, field_name: str, field: FieldInfo, value: Any, value_is_complex: bool
    ) -> Any:
        return value

    def __call__(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {}

        for field_name, field in self.settings_cls.model_fields.items():
            field_value, field_key, value_is_complex = self.get_field_value(
                field, field_name
            )
            field_value = self.prepare_field_value(
                field_name, field, field_value, value_is_complex
            )
            if field_value is not None:
                d[field_key] = field_value

        return d


LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "FATAL", "CRITICAL"]


def set_data_dir(dirname: str):
    global _data_dir

    _data_dir = dirname


class LogConfig(BaseModel):
    m_dir: str = Field("logs", alias="dir")
    level: LogLevel = "INFO"
    filename: str = "faucet-server.log"

    @computed_field
    @property
    def dir(self) -> str:
        return os.path.abspath(os.path.join(_data_dir, self.m_dir))


class EthereumConfig(BaseModel):
    # rpc endpoint, http(s):// or ws(s)://
    provider: str = ""
    privkey: SecretStr = SecretStr("")

    chain_id: Optional[int] = None
    gas: Optional[int] = None
    gas_price: Optional[int] = None
    max_fee_per_gas: Optional[int] = None
    max_priority_fee_per_gas: Optional[int] = None

    timeout: int = 10
    pool_size: int = 5


class FaucetConfig(BaseModel):
    # amount of ETH sent per request, at most 18 decimal places so it is a whole
    # number of wei
    amount: Decimal = Field(Decimal("0.05"), gt=0, decimal_places=18)
    password: Optional[SecretStr] = None
    cooldown_minutes: Optional[float] = Field(None, ge=0)

    dispense_timeout: float = 30
    poll_max_attempts: int = 20
    poll_interval: float = 5

    @property
    def amount_wei(self) -> Wei:
        return Web3.to_wei(self.amount, "ether")


class Config(BaseSettings):
    log: LogConfig = LogConfig()  # type: ignore

    ethereum: EthereumConfig = EthereumConfig()
    faucet: FaucetConfig = FaucetConfig()

    server_host: str = "0.0.0.0"
    server_port: int = 3000

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        env_file=".env",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            YamlConfigSettingsSource(settings_cls),
            env_settings,
            dotenv_settings,
            file_secret_settings,
        )

    @property
    def provider_configured(self) -> bool:
        return len(self.ethereum.provider) > 0

    @property
    def privkey_configured(self) -> bool:
        return len(self.ethereum.privkey.get_secret_value()) > 0


def load_config(data_dir: Optional[str] = None) -> Config:
    if data_dir is not None:
        set_data_dir(data_dir)
    return Config()


class TxOption(TypedDict, total=False):
    chainId: int
    gas: int
    gasPrice: Wei
    maxFeePerGas: Wei
    maxPriorityFeePerGas: Wei


def get_default_tx_option(config: Config) -> TxOption:
    res: TxOption = {}

    if config.ethereum.chain_id is not None:
        res["chainId"] = config.ethereum.chain_id
    if config.ethereum.gas is not None:
        res["gas"] = config.ethereum.gas
    if config.ethereum.gas_price is not None:
        res["gasPrice"] = Web3.to_wei(config.ethereum.gas_price, "wei")
    if config.ethereum.max_fee_per_gas is not None:
        res["maxFeePerGas"] = Web3.to_wei(config.ethereum.max_fee_per_gas, "wei")
    if config.ethereum.max_priority_fee_per_gas is not None:
        res["maxPriorityFeePerGas"] = Web3.to_wei(
            config.ethereum.max_priority_fee_per_gas, "wei"
        )
    return res
