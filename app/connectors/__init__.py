"""
app/connectors package marker.
"""

from app.connectors.base import BaseConnector, ConnectorRequestError
from app.connectors.world_bank_connector import (
    BANDWIDTH_BPS_PER_USER,
    FIXED_BROADBAND_PER_100,
    INTERNET_USERS_PCT,
    WorldBankConnector,
    pick_observation,
)

__all__ = [
    "BANDWIDTH_BPS_PER_USER",
    "BaseConnector",
    "ConnectorRequestError",
    "FIXED_BROADBAND_PER_100",
    "INTERNET_USERS_PCT",
    "WorldBankConnector",
    "pick_observation",
]
