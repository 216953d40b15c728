from greenspark.client.api_client import ApiError, GreenSparkClient
from greenspark.client.games import EcoCitySimulator, EcosystemSimulator, RecycleRush

__all__ = [
    'ApiError',
    'GreenSparkClient',
    'EcoCitySimulator',
    'EcosystemSimulator',
    'RecycleRush',
]
