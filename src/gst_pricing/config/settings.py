"""
Centralized settings for the GST pricing engine.

GST rates live in the branch's key/value config store as
gst_<order type>_cgst_percentage / gst_<order type>_sgst_percentage plus the
gst_enabled and gst_show_tax_on_bill switches. Settings parses those records
and can turn them back into a payload for the store.
"""
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

from ..engine.models import TaxRatePair
from ..engine.numeric import normalize
from ..engine.order_types import OrderTypeKey
from ..errors import GstPricingError

CONFIG_ENV_VAR = 'GST_PRICING_CONFIG'
LOG_LEVEL_ENV_VAR = 'GST_PRICING_LOG_LEVEL'

DEFAULT_RATE = TaxRatePair(cgst_percent=2.5, sgst_percent=2.5)


def rate_config_key(order_type: OrderTypeKey, component: str) -> str:
    """Config store key for one rate ("gst_dining_cgst_percentage")."""
    return f'gst_{order_type.value}_{component}_percentage'


def _default_rates() -> dict[OrderTypeKey, TaxRatePair]:
    return {key: DEFAULT_RATE for key in OrderTypeKey}


def _parse_rate(value: Any, fallback: float) -> float:
    """Parse a stored rate; unparseable values keep the fallback."""
    if value is None or isinstance(value, bool):
        return fallback
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return fallback
    if parsed != parsed:  # NaN
        return fallback
    return normalize(parsed)


def _parse_flag(value: Any, default: bool = True) -> bool:
    """Stored switches are only off when they read "false"."""
    if value is None:
        return default
    return str(value).strip().lower() != 'false'


@dataclass
class Settings:
    """Engine settings with the client's defaults."""

    gst_rates: dict[OrderTypeKey, TaxRatePair] = field(default_factory=_default_rates)
    gst_enabled: bool = True
    show_tax_on_bill: bool = True

    # Pricing mode applied to newly created menu items
    price_includes_tax: bool = True

    log_level: str = 'INFO'

    @classmethod
    def from_config_values(cls, values: Optional[Mapping[str, Any]] = None, **overrides) -> 'Settings':
        """Build settings from flat config store records."""
        values = values or {}
        rates = {}
        for key in OrderTypeKey:
            rates[key] = TaxRatePair(
                cgst_percent=_parse_rate(values.get(rate_config_key(key, 'cgst')), DEFAULT_RATE.cgst_percent),
                sgst_percent=_parse_rate(values.get(rate_config_key(key, 'sgst')), DEFAULT_RATE.sgst_percent),
            )

        settings = cls(
            gst_rates=rates,
            gst_enabled=_parse_flag(values.get('gst_enabled')),
            show_tax_on_bill=_parse_flag(values.get('gst_show_tax_on_bill')),
            price_includes_tax=str(values.get('pricing_mode', 'inclusive')).strip().lower() != 'exclusive',
        )
        for name, value in overrides.items():
            setattr(settings, name, value)
        return settings

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> 'Settings':
        """
        Load settings from a JSON file of config values.

        The path defaults to $GST_PRICING_CONFIG. A missing file means defaults.
        """
        path = config_path or os.environ.get(CONFIG_ENV_VAR)
        values = {}
        if path:
            path = Path(path)
            if path.exists():
                try:
                    with open(path, 'r', encoding='utf-8') as f:
                        values = json.load(f)
                except (OSError, json.JSONDecodeError) as e:
                    raise GstPricingError(f"Could not read GST config at {path}: {e}") from e
                if not isinstance(values, dict):
                    raise GstPricingError(f"GST config at {path} must be a JSON object")

        settings = cls.from_config_values(values)
        settings.log_level = os.environ.get(LOG_LEVEL_ENV_VAR, values.get('log_level', settings.log_level))
        return settings

    def rates_for(self, order_type: OrderTypeKey) -> TaxRatePair:
        """Effective rates for one order type (zero when GST is disabled)."""
        if not self.gst_enabled:
            return TaxRatePair()
        return self.gst_rates.get(order_type, DEFAULT_RATE)

    def gst_config(self) -> dict[str, dict[str, float]]:
        """GST config map in the shape PricingMatrixBuilder.from_definition expects."""
        return {key.value: self.rates_for(key).to_dict() for key in OrderTypeKey}

    def to_config_payload(self) -> dict[str, str]:
        """Flat records for the config store."""
        payload = {}
        for key in OrderTypeKey:
            rates = self.gst_rates.get(key, DEFAULT_RATE)
            payload[rate_config_key(key, 'cgst')] = f'{normalize(rates.cgst_percent):g}'
            payload[rate_config_key(key, 'sgst')] = f'{normalize(rates.sgst_percent):g}'
        payload['gst_enabled'] = 'true' if self.gst_enabled else 'false'
        payload['gst_show_tax_on_bill'] = 'true' if self.show_tax_on_bill else 'false'
        return payload


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reset_settings():
    """Drop the cached settings so the next get_settings() reloads them."""
    global _settings
    _settings = None
